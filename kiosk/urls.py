from django.urls import path
from . import views

app_name = 'kiosk'

urlpatterns = [
    # Driver-facing (tablet)
    path('', views.home, name='home'),
    path('carriers/', views.carriers, name='carriers'),
    path('carriers/pin/', views.carrier_pin, name='carrier_pin'),
    path('carriers/add/', views.carrier_add, name='carrier_add'),
    path('orders/', views.orders, name='orders'),
    path('orders/selection/', views.orders_selection, name='orders_selection'),
    path('orders/checkout/', views.orders_checkout, name='orders_checkout'),
    path('orders/signature/', views.signature, name='signature'),

    # PWA
    path('manifest.json', views.pwa_manifest, name='pwa_manifest'),
    path('sw.js', views.service_worker, name='service_worker'),
]
