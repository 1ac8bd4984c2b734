"""장식 이미지 생성 프롬프트 템플릿"""

from typing import Dict, Optional

from decorapi.schemas.generate import DecorStyle, Intensity, Lighting, SceneType

INTENSITY_GUIDANCE: Dict[Intensity, Dict[str, str]] = {
    Intensity.MINIMAL: {
        "coverage": "very sparse and minimal",
        "quantity": "just a few key pieces",
        "approach": "Use restraint and focus on 1-2 focal points only",
        "descriptor": "extremely understated",
    },
    Intensity.LIGHT: {
        "coverage": "light and tasteful",
        "quantity": "a modest selection",
        "approach": "Add decorations sparingly in key areas",
        "descriptor": "subtle and refined",
    },
    Intensity.MEDIUM: {
        "coverage": "balanced",
        "quantity": "a good variety",
        "approach": "Decorate main areas with balanced coverage",
        "descriptor": "pleasantly decorated",
    },
    Intensity.HEAVY: {
        "coverage": "generous and abundant",
        "quantity": "numerous decorative elements",
        "approach": "Add extensive decorations throughout the space",
        "descriptor": "richly decorated",
    },
    Intensity.MAXIMAL: {
        "coverage": "lavish and fully decorated",
        "quantity": "an abundance of decorations",
        "approach": "Fill the space with maximum festive decorations in every visible area",
        "descriptor": "spectacularly decorated with no bare spaces",
    },
}

STYLE_DESCRIPTIONS: Dict[DecorStyle, Dict[str, str]] = {
    DecorStyle.CLASSIC_CHRISTMAS: {
        "exterior": "traditional Christmas decorations in warm whites, reds, and golds - string lights, wreaths with bows, garland, and seasonal outdoor accents",
        "interior": "classic Christmas decorations in traditional red, gold, and green - festive textiles, garland, string lights, and decorative pieces that fit the space",
        "mood": "warm and traditionally festive",
    },
    DecorStyle.NORDIC_MINIMALIST: {
        "exterior": "minimalist Nordic Christmas decorations in whites and natural wood tones - simple LED lights, understated wreaths, and clean-lined accents",
        "interior": "Scandinavian minimalist holiday decor - white candles, sparse evergreen branches, natural textiles, and geometric accents",
        "mood": "clean, serene, and understated with Scandinavian simplicity",
    },
    DecorStyle.MODERN_SILVER: {
        "exterior": "modern metallic Christmas decorations in cool whites and silvers - sleek LED lights, contemporary wreaths, and geometric accents",
        "interior": "modern silver Christmas decorations - metallic accents, geometric decor, cool LED lighting, and sleek ornamental pieces",
        "mood": "elegant, contemporary, and sophisticated",
    },
    DecorStyle.COZY_FAMILY: {
        "exterior": "cozy family Christmas decorations in warm colors - welcoming lights, cheerful wreaths, whimsical figures, and festive accents",
        "interior": "cozy family Christmas decor - ambient lighting, plush textiles, festive pillows, rustic wood accents, and cheerful ornaments",
        "mood": "warm, inviting, and playfully festive",
    },
    DecorStyle.RUSTIC_FARMHOUSE: {
        "exterior": "rustic farmhouse Christmas decorations - vintage-style lights, evergreen wreaths with burlap, wooden signs, and country accents",
        "interior": "rustic farmhouse Christmas decor - burlap accents, wooden ornaments, galvanized metal containers, plaid textiles, and natural greenery",
        "mood": "warm, rustic, and authentically country",
    },
    DecorStyle.ELEGANT_GOLD: {
        "exterior": "elegant gold Christmas decorations in metallics and creams - warm white lights, gold-adorned wreaths, and sophisticated garland",
        "interior": "elegant gold Christmas decorations - gold ornamental accents, metallic garland, champagne-colored textiles, and refined pieces",
        "mood": "elegant, luxurious, and sophisticated",
    },
    DecorStyle.COLORFUL_WHIMSICAL: {
        "exterior": "colorful whimsical Christmas decorations - rainbow multicolor lights, bold wreaths, playful figures, and fun festive accents",
        "interior": "colorful whimsical Christmas decor - vibrant textiles, rainbow lighting, fun patterned fabrics, and cheerful ornamental accents",
        "mood": "joyful, vibrant, and playfully festive",
    },
}

INTERIOR_CONTEXT = (
    " Analyze the room type and function in the image, then select decorations that make"
    " sense for that specific space. Avoid adding large items like Christmas trees in"
    " spaces where they would not naturally fit."
)

NIGHT_LIGHTING = (
    ". The scene should be depicted at nighttime with a dark sky. Make all lights from the"
    " decorations glow beautifully and luminously in the darkness."
)
DAY_LIGHTING = (
    ". Ensure all decorations are vibrant, colorful, and clearly visible in bright daylight."
)

PRODUCT_DETECTION_PROMPT = (
    "Analyze this Christmas-decorated space and identify up to 6 distinct decorative items"
    " that are clearly visible and suitable for purchase. For each item, provide a concise"
    " product name, a 1-sentence description, and a concise e-commerce search term."
    " If no clear items are visible, return an empty array."
)


def build_decoration_prompt(
    style: DecorStyle,
    scene: SceneType,
    lighting: Lighting = Lighting.DAY,
    intensity: Intensity = Intensity.MEDIUM,
    custom_prompt: Optional[str] = None,
) -> str:
    is_exterior = scene == SceneType.EXTERIOR
    guide = INTENSITY_GUIDANCE.get(intensity, INTENSITY_GUIDANCE[Intensity.MEDIUM])
    designer = "exterior holiday decorator" if is_exterior else "interior designer"
    preserve = (
        "Maintain the original house architecture and structure."
        if is_exterior
        else "Maintain the original room structure and architecture."
    )
    context = "" if is_exterior else INTERIOR_CONTEXT

    if style == DecorStyle.CUSTOM:
        body = (
            f"{custom_prompt}. {guide['approach']} with {guide['quantity']} to create a"
            f" {guide['descriptor']} look.{context} {preserve}"
        )
    else:
        style_data = STYLE_DESCRIPTIONS[style]
        variation = style_data["exterior" if is_exterior else "interior"]
        body = (
            f"Add {guide['coverage']} {variation}. {guide['approach']} with"
            f" {guide['quantity']}.{context} {preserve} The result should be"
            f" {guide['descriptor']} and {style_data['mood']}."
        )

    prompt = f"As an expert {designer} specializing in Christmas decorations, {body}"
    prompt += NIGHT_LIGHTING if lighting == Lighting.NIGHT else DAY_LIGHTING
    return prompt
