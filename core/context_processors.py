from django.conf import settings


def site_info(request):
    return {
        'SITE_NAME': getattr(settings, 'SITE_NAME', 'Art Vibe'),
        'SUPPORT_EMAIL': getattr(settings, 'SUPPORT_EMAIL', ''),
        'ORDERS_URL': getattr(settings, 'ORDERS_URL', '/orders/'),
    }
