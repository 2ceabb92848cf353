from .base import *  # noqa: F401,F403

DEBUG = False
API_AUTH_TOKEN = ''
API_REQUIRE_AUTH = False
SECURE_SSL_REDIRECT = False
SECURE_HSTS_SECONDS = 0
SECURE_HSTS_INCLUDE_SUBDOMAINS = False
SECURE_HSTS_PRELOAD = False

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    },
}

# Keep screening output out of the test log unless something breaks.
LOGGING['root']['level'] = 'WARNING'  # noqa: F405

REST_FRAMEWORK = {
    **REST_FRAMEWORK,  # noqa: F405
    'DEFAULT_THROTTLE_RATES': {
        'screen': '10000/minute',
        'default': '10000/minute',
    },
}
