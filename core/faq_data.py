# core/faq_data.py

FAQ_DATA = [
    {
        'question': 'What is Art Vibe?',
        'answer': 'Art Vibe is a multi-vendor e-commerce platform that connects buyers with Nepali artists, crafters, and vendors offering authentic handmade goods like paintings, woodcrafts, textiles, pottery, and more.'
    },
    {
        'question': 'How do I place an order?',
        'answer': "Browse the product listings, add desired items to your cart, and proceed to checkout. You'll be guided to enter your shipping details and complete payment securely."
    },
    {
        'question': 'Are all products authentic and handmade?',
        'answer': 'Yes. We work exclusively with trusted Nepali vendors and artisans who specialize in original, handmade, and culturally significant goods.'
    },
    {
        'question': 'Can I become a vendor on Art Vibe?',
        'answer': "Absolutely! If you're a Nepali artist or craftsperson, you can register as a vendor on our platform. After verification, you'll be able to list and sell your products online."
    },
    {
        'question': 'What payment methods are accepted?',
        'answer': 'We support various payment methods including eSewa, Khalti, bank transfers, and major debit/credit cards. All payments are processed securely.'
    },
    {
        'question': 'How is shipping handled?',
        'answer': "Each vendor manages their own shipping. Delivery timelines and shipping fees may vary depending on the seller's location and the customer's address."
    },
    {
        'question': 'What if I receive a damaged or wrong item?',
        'answer': 'Please contact the vendor directly through your order page. If the issue is unresolved, you can open a support request with Art Vibe for mediation.'
    },
    {
        'question': 'Is there a return or refund policy?',
        'answer': "Return and refund policies are set by individual vendors. Please review the seller's policy before purchasing. If a refund is approved, it will be processed to your original payment method."
    },
    {
        'question': 'How do I contact Art Vibe support?',
        'answer': 'You can reach out to our support team via email at support@artvibe.com or use the contact form on the website.'
    },
]
