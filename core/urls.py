from django.urls import path
from . import views

app_name = 'core'

urlpatterns = [
    path('', views.home, name='home'),
    path('faqs/', views.faqs_page, name='faqs'),
    path('faqs/toggle/<int:index>/', views.faq_toggle, name='faq_toggle'),
    path('terms-and-conditions/', views.terms_and_conditions_page, name='terms_and_conditions'),
    path('health/', views.health_check, name='health'),
]
