from django.urls import path
from . import views

app_name = 'analytics'

urlpatterns = [
    # Admin dashboard
    path('dashboard/', views.dashboard, name='dashboard'),
    path('chart-data/', views.chart_data, name='chart-data'),

    # Earnings
    path('earnings/', views.earnings, name='earnings'),
]
