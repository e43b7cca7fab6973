from setuptools import setup

VERSION = "0.1.0"
REQUIRES = ["requests>=2.6.0", "urllib3>=1.26"]
TESTS_REQUIRE = ["pytest", "mock", "requests-mock"]

setup(
    name='pactv3',
    packages=['pactv3'],
    version=VERSION,
    description='Consumer side of a consumer driven contract testing library.',
    keywords=['testing', 'pact', 'contract'],
    classifiers=[],
    python_requires='>=3.7',
    install_requires=REQUIRES,
    extras_require={'test': TESTS_REQUIRE})
