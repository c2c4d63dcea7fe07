from django.test import TestCase, SimpleTestCase, Client
from django.urls import reverse

from .accordion import Accordion, toggle, parse_open_index
from .faq_data import FAQ_DATA
from .tos_data import TOS_DATA


class AccordionTests(SimpleTestCase):
    def test_toggle_same_index_twice_collapses(self):
        accordion = Accordion(FAQ_DATA)
        self.assertEqual(accordion.toggle(3), 3)
        self.assertIsNone(accordion.toggle(3))
        self.assertFalse(any(entry['is_open'] for entry in accordion.entries()))

    def test_toggle_other_index_moves_expansion(self):
        accordion = Accordion(FAQ_DATA)
        accordion.toggle(1)
        accordion.toggle(4)
        open_entries = [entry['index'] for entry in accordion.entries() if entry['is_open']]
        self.assertEqual(open_entries, [4])

    def test_at_most_one_entry_open(self):
        """Any sequence of toggles over the 9 entries leaves zero or one panel open."""
        self.assertEqual(len(FAQ_DATA), 9)
        accordion = Accordion(FAQ_DATA)
        for index in [0, 8, 8, 2, 5, 5, 5, 7, 0, 1]:
            accordion.toggle(index)
            open_count = sum(1 for entry in accordion.entries() if entry['is_open'])
            self.assertLessEqual(open_count, 1)

    def test_out_of_range_index_raises(self):
        accordion = Accordion(FAQ_DATA)
        with self.assertRaises(IndexError):
            accordion.toggle(9)
        with self.assertRaises(IndexError):
            Accordion(FAQ_DATA, open_index=42)

    def test_toggle_function(self):
        self.assertEqual(toggle(None, 2), 2)
        self.assertIsNone(toggle(2, 2))
        self.assertEqual(toggle(2, 6), 6)

    def test_parse_open_index(self):
        self.assertEqual(parse_open_index('3'), 3)
        self.assertIsNone(parse_open_index(None))
        self.assertIsNone(parse_open_index('abc'))
        self.assertIsNone(parse_open_index('-1'))


class FaqViewTests(TestCase):
    def setUp(self):
        self.client = Client()

    def test_faq_page_renders_all_questions_collapsed(self):
        response = self.client.get(reverse('core:faqs'))
        self.assertEqual(response.status_code, 200)
        self.assertTemplateUsed(response, 'core/faqs.html')
        self.assertContains(response, 'What is Art Vibe?')
        self.assertContains(response, 'How do I contact Art Vibe support?')
        self.assertNotContains(response, 'faq-answer')

    def test_faq_page_with_open_param_expands_one(self):
        response = self.client.get(reverse('core:faqs'), {'open': 0})
        self.assertContains(response, 'faq-answer', count=1)
        self.assertContains(response, 'multi-vendor e-commerce platform')

    def test_stale_open_param_collapses_everything(self):
        response = self.client.get(reverse('core:faqs'), {'open': 99})
        self.assertEqual(response.status_code, 200)
        self.assertNotContains(response, 'faq-answer')

    def test_htmx_toggle_returns_partial_with_new_item_open(self):
        url = reverse('core:faq_toggle', args=[2])
        response = self.client.get(url, {'open': 0}, HTTP_HX_REQUEST='true')
        self.assertEqual(response.status_code, 200)
        self.assertTemplateUsed(response, 'core/partials/faq_list.html')
        self.assertTemplateNotUsed(response, 'base.html')
        self.assertEqual(response.context['open_index'], 2)
        self.assertContains(response, 'faq-answer', count=1)
        self.assertContains(response, 'trusted Nepali vendors and artisans')

    def test_htmx_toggle_open_item_collapses(self):
        url = reverse('core:faq_toggle', args=[2])
        response = self.client.get(url, {'open': 2}, HTTP_HX_REQUEST='true')
        self.assertIsNone(response.context['open_index'])
        self.assertNotContains(response, 'faq-answer')

    def test_plain_toggle_redirects_with_state_in_url(self):
        url = reverse('core:faq_toggle', args=[5])
        response = self.client.get(url)
        self.assertRedirects(response, f"{reverse('core:faqs')}?open=5")

        response = self.client.get(url, {'open': 5})
        self.assertRedirects(response, reverse('core:faqs'))

    def test_toggle_out_of_range_is_404(self):
        response = self.client.get(reverse('core:faq_toggle', args=[9]))
        self.assertEqual(response.status_code, 404)


class TermsViewTests(TestCase):
    def test_terms_page_renders_every_section(self):
        response = self.client.get(reverse('core:terms_and_conditions'))
        self.assertEqual(response.status_code, 200)
        self.assertTemplateUsed(response, 'core/terms_and_conditions.html')
        for section in TOS_DATA['sections']:
            self.assertContains(response, section['heading'])
        self.assertContains(response, 'Vendors are required to fulfill orders in a timely and professional manner.')

    def test_htmx_request_gets_fragment_only(self):
        response = self.client.get(reverse('core:terms_and_conditions'), HTTP_HX_REQUEST='true')
        self.assertTemplateUsed(response, 'core/partials/terms_content_fragment.html')
        self.assertTemplateNotUsed(response, 'base.html')


class SupportingPageTests(TestCase):
    def test_home_page_links_to_info_pages(self):
        response = self.client.get(reverse('core:home'))
        self.assertEqual(response.status_code, 200)
        self.assertContains(response, reverse('core:faqs'))
        self.assertContains(response, reverse('core:terms_and_conditions'))

    def test_health_check(self):
        response = self.client.get(reverse('core:health'))
        self.assertEqual(response.status_code, 200)
        data = response.json()
        self.assertEqual(data['status'], 'OK')
        self.assertEqual(data['message'], 'Server is healthy')
        self.assertIn('timestamp', data)
