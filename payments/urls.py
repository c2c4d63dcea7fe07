from django.urls import path
from . import views

app_name = 'payments'

urlpatterns = [
    # Gateway proxy (called by the storefront's JS)
    path('api/payments/khalti/initiate', views.khalti_initiate, name='khalti_initiate'),
    path('api/payments/khalti/lookup', views.khalti_lookup, name='khalti_lookup'),

    # Pages
    path('checkout/khalti/return/', views.khalti_return, name='khalti_return'),
    path('checkout/success/', views.order_success, name='order_success'),
]
