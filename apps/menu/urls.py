from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'menu'

router = DefaultRouter()
router.register(r'', views.MenuItemViewSet, basename='menuitem')

urlpatterns = [
    # Menu ViewSet routes
    # GET    /api/menu/                 - List menu items
    # POST   /api/menu/                 - Create item (admin)
    # GET    /api/menu/{id}/            - Get item
    # PUT    /api/menu/{id}/            - Update item (admin)
    # PATCH  /api/menu/{id}/            - Partial update (admin)
    # DELETE /api/menu/{id}/            - Delete item (admin)

    # Custom actions
    # POST   /api/menu/{id}/toggle/     - Set availability (admin)
    # GET    /api/menu/categories/      - List categories
    # GET    /api/menu/top-sellers/     - Best-selling items

    path('', include(router.urls)),
]
