REFERENCE_IMAGE_INSTRUCTION = """
REFERENCE IMAGE PROVIDED: Use the provided sample product image as a style and design reference.
Generate a similar product that:
- Matches the visual style, quality, and presentation of the reference image
- Has similar lighting, background, and composition
- Maintains the professional ecommerce photography aesthetic
- Creates a product that fits the same visual category and quality level
"""

RETRY_INSTRUCTION = """
PREVIOUS ATTEMPTS FAILED: The previous image was a placeholder or generic graphic. You MUST generate a REAL PHOTOGRAPH of an actual physical product. This is retry attempt {attempt}/{max_attempts}.
- DO NOT create simple graphics, gray boxes, or text overlays
- DO NOT use placeholder images
- Generate ONLY a real product photograph like you would see on professional ecommerce sites
- The image MUST show a tangible, physical product item with realistic textures and materials
"""

USER_PROMPT = """Generate a realistic ecommerce product for the {category} category. Create a specific, detailed product with a PHOTOGRAPHIC image of the actual product.
{reference_instruction}{retry_instruction}
CRITICAL IMAGE REQUIREMENTS - READ CAREFULLY:
- The image MUST be a high-quality PHOTOGRAPH showing ONE REAL PHYSICAL PRODUCT
- NO text, NO labels, NO category names, NO placeholders, NO gray boxes with text
- The image must show the actual product item as it would appear in real life
- Use professional product photography style
- The product must be clearly visible with proper lighting
- Use a clean, neutral background (white, light gray, or subtle gradient)
- The product should be the main focus, centered and well-lit
- Show the product from an angle that displays its features (not just front-on)
- Include realistic textures, materials, and details

DO NOT GENERATE:
- Placeholder images
- Gray squares with text
- Simple graphics or icons
- Category name labels
- Generic stock photo templates

Create a specific product (not generic) with:
1. A creative and specific product title (not just "{category}", but something like "Modern Ergonomic Office Chair with Lumbar Support")
2. A detailed product description (2-3 paragraphs) covering materials, features, dimensions and benefits
3. A realistic price in USD (format as a number like "99.99")
4. At least 2 product variants with different options (e.g. Small/Large, Black/White) and their prices
5. A list of 3-5 key features

Format your response as JSON with the following structure:
{{
  "title": "Specific Product Title (not just category name)",
  "description": "Full product description with details about materials, features, dimensions...",
  "price": "99.99",
  "variants": [
    {{"title": "Small / Black", "price": "79.99"}},
    {{"title": "Large / White", "price": "119.99"}}
  ],
  "features": ["Feature 1", "Feature 2", "Feature 3"]
}}"""

REFERENCE_IMAGE_NOTE = """

Note: A reference sample image has been provided. Generate the product image to match the visual style, quality, composition, and aesthetic of the sample."""
