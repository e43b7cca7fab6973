import json

import requests


CLIENT_HEADERS = {
    'X-Pact-Mock-Service': 'true',
    'Content-Type': 'application/json'
}


class MockServerClient(requests.Session):
    """
    Admin client of a running pact mock service.
    """

    def __init__(self, base_uri, *args, **kwargs):
        super(MockServerClient, self).__init__(*args, **kwargs)

        self.base_uri = base_uri
        self.headers.update(CLIENT_HEADERS)

    def get_verification(self):
        # a failed verification is a result, not an error
        return self.get('{}/interactions/verification'.format(self.base_uri))

    def put_interactions(self, interactions):
        self.put(
            '{}/interactions'.format(self.base_uri),
            data=json.dumps({'interactions': interactions})
        ).raise_for_status()

    def delete_interactions(self):
        self.delete('{}/interactions'.format(self.base_uri)).raise_for_status()
