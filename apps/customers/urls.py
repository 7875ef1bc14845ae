from django.urls import path
from . import views

app_name = 'customers'

urlpatterns = [
    path('', views.customer_list, name='customer-list'),
    path('purchase/', views.purchase, name='purchase'),

    # Per-customer rewards
    path('<uuid:customer_id>/claim-reward/', views.claim_reward, name='claim-reward'),
    path('<uuid:customer_id>/drinks/<str:category>/', views.category_drinks, name='category-drinks'),
]
