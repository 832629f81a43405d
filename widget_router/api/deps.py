# Role: Process-wide singletons shared by the HTTP routers. Imported after config.load_env() so settings see .env.

from widget_router.config import RouterSettings
from widget_router.core.session_controller import SessionController

session_controller = SessionController(settings=RouterSettings.from_env())
