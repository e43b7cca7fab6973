"""Provides API for naming service providers"""


class Provider(object):

    def __init__(self, name):
        self.name = name
