"""
LLM integration layer.

Responsibilities:
- Manage Groq API configuration and credentials.
- Build localized prompts from a natural-language request, mood and ingredients.
- Call the Groq LLM and parse its JSON output into generated recipes.
- Surface configuration, API and parse failures as localized server errors.
"""
