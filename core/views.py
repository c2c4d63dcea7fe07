from django.http import Http404, JsonResponse
from django.shortcuts import render, redirect
from django.urls import reverse
from django.utils import timezone
from django.views.decorators.http import require_GET

# Import data files
from .faq_data import FAQ_DATA
from .tos_data import TOS_DATA
from .accordion import Accordion, parse_open_index

# ==============================================================================
# 1. FUNCTION-BASED VIEWS (Data-Driven Pages)
# ==============================================================================

def home(request):
    """Renders the home page (catalog root)."""
    return render(request, 'core/home.html')


def _faq_accordion(open_index):
    try:
        return Accordion(FAQ_DATA, open_index)
    except IndexError:
        # A stale or hand-edited ?open= value just collapses everything
        return Accordion(FAQ_DATA)


def faqs_page(request):
    """Renders the FAQ page. `?open=<n>` pre-expands a single question."""
    accordion = _faq_accordion(parse_open_index(request.GET.get('open')))
    context = {
        'faq_items': accordion.entries(),
        'open_index': accordion.open_index,
    }
    return render(request, 'core/faqs.html', context)


@require_GET
def faq_toggle(request, index):
    """
    HTMX view that toggles one FAQ panel.
    The current state arrives as `?open=<n>`; the whole list is re-rendered so the
    previously open panel collapses along with the click.
    """
    accordion = _faq_accordion(parse_open_index(request.GET.get('open')))
    try:
        open_index = accordion.toggle(index)
    except IndexError:
        raise Http404("No such FAQ entry.")

    if request.htmx:
        context = {
            'faq_items': accordion.entries(),
            'open_index': open_index,
        }
        return render(request, 'core/partials/faq_list.html', context)

    # No-JS fallback: keep the state in the URL
    url = reverse('core:faqs')
    if open_index is not None:
        url = f"{url}?open={open_index}"
    return redirect(url)


def terms_and_conditions_page(request):
    """Renders the Terms and Conditions page."""

    # --- HTMX FRAGMENT HANDLING FOR POPUP ---
    if request.htmx:
        # If HTMX requests this view, render only the content fragment
        return render(request, 'core/partials/terms_content_fragment.html', {'tos_data': TOS_DATA})

    return render(request, 'core/terms_and_conditions.html', {'tos_data': TOS_DATA})


@require_GET
def health_check(request):
    return JsonResponse({
        'status': 'OK',
        'message': 'Server is healthy',
        'timestamp': timezone.now().isoformat(),
    })
