from django.urls import path
from . import views

urlpatterns = [
    path('health/', views.health_check, name='health_check'),
    path('orders/', views.order_list, name='order_list'),
    path('orders/pickup/', views.order_pickup, name='order_pickup'),
    path('carriers/', views.carrier_list, name='carrier_list'),
    path('verify-pin/', views.verify_pin, name='verify_pin'),
]
