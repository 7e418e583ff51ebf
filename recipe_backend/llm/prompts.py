from __future__ import annotations

from ..recipes.models import Language

_RESPONSE_FORMAT = """\
{
  "recipes": [
    {
      "title": "%(title)s",
      "description": "%(description)s",
      "ingredients": [
        {"name": "%(ingredient)s", "quantity": "%(quantity)s", "unit": "%(unit)s"}
      ],
      "instructions": ["%(step1)s", "%(step2)s"],
      "cookTime": 30,
      "difficulty": "easy|medium|hard",
      "tags": ["tag1", "tag2"],
      "nutritionHighlights": "%(nutrition)s"
    }
  ]
}"""

SYSTEM_PROMPTS: dict[Language, str] = {
    Language.en: (
        "You are a professional chef and culinary expert. Your role is to suggest "
        "creative, delicious, and practical recipes based on user requests.\n\n"
        "Guidelines:\n"
        "- Generate 3 unique and diverse recipe suggestions\n"
        "- Each recipe should be complete with ingredients and instructions\n"
        "- Consider the user's mood, available ingredients, and preferences\n"
        "- Provide recipes that are realistic and achievable\n"
        "- Include cooking time, difficulty level, and nutritional highlights\n\n"
        "Return ONLY valid JSON in this exact format:\n"
        + _RESPONSE_FORMAT % {
            "title": "Recipe Name",
            "description": "Brief description (2-3 sentences)",
            "ingredient": "ingredient name",
            "quantity": "amount",
            "unit": "measurement",
            "step1": "Step 1 instruction",
            "step2": "Step 2 instruction",
            "nutrition": "Brief nutrition info",
        }
    ),
    Language.fr: (
        "Vous êtes un chef professionnel et expert culinaire. Votre rôle est de "
        "suggérer des recettes créatives, délicieuses et pratiques basées sur les "
        "demandes des utilisateurs.\n\n"
        "Directives:\n"
        "- Générez 3 suggestions de recettes uniques et diversifiées\n"
        "- Chaque recette doit être complète avec ingrédients et instructions\n"
        "- Considérez l'humeur de l'utilisateur, les ingrédients disponibles et les préférences\n"
        "- Fournissez des recettes réalistes et réalisables\n"
        "- Incluez le temps de cuisson, le niveau de difficulté et les points nutritionnels\n\n"
        "Répondez UNIQUEMENT en JSON valide avec cette structure exacte:\n"
        + _RESPONSE_FORMAT % {
            "title": "Nom de la recette",
            "description": "Brève description (2-3 phrases)",
            "ingredient": "nom de l'ingrédient",
            "quantity": "quantité",
            "unit": "mesure",
            "step1": "Instruction étape 1",
            "step2": "Instruction étape 2",
            "nutrition": "Brève info nutritionnelle",
        }
    ),
    Language.ar: (
        "أنت طاهٍ محترف وخبير في الطهي. دورك هو اقتراح وصفات إبداعية ولذيذة وعملية "
        "بناءً على طلبات المستخدمين.\n\n"
        "الإرشادات:\n"
        "- قم بإنشاء 3 اقتراحات وصفات فريدة ومتنوعة\n"
        "- يجب أن تكون كل وصفة كاملة مع المكونات والتعليمات\n"
        "- ضع في اعتبارك مزاج المستخدم والمكونات المتاحة والتفضيلات\n"
        "- قدم وصفات واقعية وقابلة للتحقيق\n"
        "- قم بتضمين وقت الطهي ومستوى الصعوبة والنقاط الغذائية\n\n"
        "أعد JSON صالحًا فقط بهذا الهيكل بالضبط:\n"
        + _RESPONSE_FORMAT % {
            "title": "اسم الوصفة",
            "description": "وصف موجز (2-3 جمل)",
            "ingredient": "اسم المكون",
            "quantity": "الكمية",
            "unit": "الوحدة",
            "step1": "تعليمات الخطوة 1",
            "step2": "تعليمات الخطوة 2",
            "nutrition": "معلومات غذائية موجزة",
        }
    ),
}

_MOOD_TEXT = {
    Language.en: "I'm feeling {mood}.",
    Language.fr: "Je me sens {mood}.",
    Language.ar: "أشعر بـ {mood}.",
}

_INGREDIENTS_TEXT = {
    Language.en: "I have these ingredients available: {items}.",
    Language.fr: "J'ai ces ingrédients disponibles: {items}.",
    Language.ar: "لدي هذه المكونات المتاحة: {items}.",
}

_SEPARATOR = {Language.en: ", ", Language.fr: ", ", Language.ar: "، "}

_SERVINGS_TEXT = {
    Language.en: ("I need to cook for {n} person.", "I need to cook for {n} people."),
    Language.fr: ("Je dois cuisiner pour {n} personne.", "Je dois cuisiner pour {n} personnes."),
    Language.ar: ("أحتاج للطهي لـ {n} شخص.", "أحتاج للطهي لـ {n} أشخاص."),
}

RESULT_MESSAGES = {
    Language.en: (
        "I've created {count} unique recipes just for you! They are freshly generated "
        "from your request and tailored to your preferences. Enjoy cooking!"
    ),
    Language.fr: (
        "J'ai créé {count} recettes uniques rien que pour vous ! Elles sont générées "
        "selon votre demande et adaptées à vos préférences. Bon appétit !"
    ),
    Language.ar: (
        "لقد أنشأت {count} وصفات فريدة خصيصًا لك! تم إنشاؤها بناءً على طلبك "
        "ومصممة حسب تفضيلاتك. استمتع بالطهي!"
    ),
}

ERROR_MESSAGES = {
    "not_configured": {
        Language.en: "The AI recipe assistant is not configured.",
        Language.fr: "L'assistant de recettes IA n'est pas configuré.",
        Language.ar: "مساعد الوصفات الذكي غير مهيأ.",
    },
    "upstream": {
        Language.en: "The AI recipe assistant is unavailable. Please try again later.",
        Language.fr: "L'assistant de recettes IA est indisponible. Veuillez réessayer plus tard.",
        Language.ar: "مساعد الوصفات الذكي غير متاح. يرجى المحاولة لاحقًا.",
    },
    "bad_response": {
        Language.en: "Failed to understand the AI response. Please try again.",
        Language.fr: "Impossible de comprendre la réponse de l'IA. Veuillez réessayer.",
        Language.ar: "تعذر فهم رد الذكاء الاصطناعي. يرجى المحاولة مرة أخرى.",
    },
}


def build_user_prompt(
    prompt: str,
    lang: Language,
    mood: str | None = None,
    ingredients: list[str] | None = None,
    servings: int = 2,
) -> str:
    parts = [prompt.strip()]
    if mood:
        parts.append(_MOOD_TEXT[lang].format(mood=mood))
    if ingredients:
        parts.append(_INGREDIENTS_TEXT[lang].format(items=_SEPARATOR[lang].join(ingredients)))
    singular, plural = _SERVINGS_TEXT[lang]
    parts.append((singular if servings == 1 else plural).format(n=servings))
    return " ".join(p for p in parts if p)
