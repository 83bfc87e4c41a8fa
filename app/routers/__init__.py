# API routers package

from app.routers.auth import router as auth_router
from app.routers.admin import router as admin_router
from app.routers.providers import router as providers_router
from app.routers.users import router as users_router
from app.routers.models import router as models_router
from app.routers.generate import router as generate_router

# Re-export for easy importing
auth = auth_router
admin = admin_router
providers = providers_router
users = users_router
models = models_router
generate = generate_router
