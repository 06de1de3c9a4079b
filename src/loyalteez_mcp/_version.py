__version__ = "1.0.0"

# Remote API version sent as X-API-Version
API_VERSION = "v1"
