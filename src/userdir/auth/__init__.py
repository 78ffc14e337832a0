"""Authentication.

Learn: stateless bearer tokens. TokenCodec issues and verifies signed
JWTs; the AuthenticationGate middleware verifies the Authorization
header on every request and installs an identity when it is valid;
AccessPolicyMiddleware then turns anonymous callers away from every
route except login and user creation.
"""
