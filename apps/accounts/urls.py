from django.urls import path
from . import views

app_name = 'accounts'

urlpatterns = [
    # Authentication
    path('login/', views.login, name='login'),
    path('logout/', views.logout, name='logout'),
    path('change-password/', views.change_password, name='change-password'),

    # Profile
    path('profile/', views.profile, name='profile'),
    path('shop/', views.shop, name='shop'),
]
