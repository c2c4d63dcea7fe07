# core/tos_data.py

TOS_DATA = {
    'title': 'Terms and Conditions',
    'intro': '<p>Welcome to <strong>Art Vibe</strong>, a multi-vendor platform dedicated to promoting and selling authentic Nepali goods including paintings, handicrafts, traditional artworks, and more. These Terms and Conditions govern your access to and use of the Art Vibe website and services. By using our platform, you agree to comply with and be bound by the following terms.</p>',
    'sections': [
        {
            'heading': '1. General',
            'items': [
                'Art Vibe is an online marketplace connecting buyers with independent Nepali vendors and artists.',
                'We act as a facilitator and are not directly involved in the transactions between buyers and sellers.',
                'All users must be at least 18 years old or have parental/guardian consent to use the platform.',
            ],
        },
        {
            'heading': '2. Vendor Responsibilities',
            'items': [
                'Vendors are solely responsible for the accuracy, quality, and legality of the products they list.',
                'All products must be original, authentic, and comply with Nepali cultural and legal standards.',
                'Vendors are required to fulfill orders in a timely and professional manner.',
            ],
        },
        {
            'heading': '3. Buyer Responsibilities',
            'items': [
                'Buyers are responsible for providing accurate shipping and contact information.',
                'By placing an order, the buyer agrees to pay the listed price and any applicable fees.',
                'Disputes regarding orders should first be addressed directly with the vendor.',
            ],
        },
        {
            'heading': '4. Payments and Fees',
            'items': [
                'Payments are processed securely through our integrated payment gateways.',
                'Art Vibe may charge a service or commission fee from vendors for each transaction.',
                'Fees are subject to change with prior notice.',
            ],
        },
        {
            'heading': '5. Intellectual Property',
            'items': [
                'All content on Art Vibe, including logos, designs, and product images, are protected by copyright and trademark laws.',
                'Vendors retain rights to their own artwork but grant Art Vibe a license to display and market the content on the platform.',
            ],
        },
        {
            'heading': '6. Termination',
            'items': [
                'Art Vibe reserves the right to suspend or terminate user accounts that violate these terms or misuse the platform.',
                'Users may terminate their account at any time through their dashboard or by contacting support.',
            ],
        },
        {
            'heading': '7. Limitation of Liability',
            'items': [
                'Art Vibe is not liable for any direct or indirect damages arising from the use of the platform.',
                'We do not guarantee continuous, uninterrupted access to the site.',
            ],
        },
        {
            'heading': '8. Changes to Terms',
            'content': '<p>Art Vibe reserves the right to modify these Terms and Conditions at any time. Updates will be posted on this page. Continued use of the platform after changes indicates acceptance of the new terms.</p>',
        },
        {
            'heading': '9. Contact Us',
            'content': '<p>If you have any questions or concerns about these Terms and Conditions, please contact us at <a href="mailto:support@artvibe.com">support@artvibe.com</a>.</p>',
        },
    ],
}
