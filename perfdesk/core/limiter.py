from slowapi import Limiter
from slowapi.util import get_remote_address

from perfdesk.core.config import settings

# Disabled under test so repeated logins from the TestClient are not throttled
limiter = Limiter(
    key_func=get_remote_address,
    enabled=settings.environment != "testing",
)
