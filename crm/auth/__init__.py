from .access import Actor, AuthSession, ANONYMOUS
from .provider import AuthProvider
