"""
URL configuration for ArtVibe_Shop project.

The `urlpatterns` list routes URLs to views. For more information please see:
    https://docs.djangoproject.com/en/5.2/topics/http/urls/
"""
from django.urls import path, include


urlpatterns = [
    path('', include('core.urls', namespace='core')),
    path('', include('payments.urls', namespace='payments')),
]
