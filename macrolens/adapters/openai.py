from django.conf import settings
import openai


class OpenAIAdapter:
    def __init__(self, api_key: str | None = None, client: openai.OpenAI | None = None):
        self.api_key = api_key if api_key is not None else settings.OPENAI_API_KEY
        if not self.api_key:
            raise ValueError("OPENAI_API_KEY is not set in settings.py")
        self.model = settings.OPENAI_MODEL
        self.client = client if client is not None else openai.OpenAI(api_key=self.api_key)

    def generate_insight(self, prompt: str) -> str | None:
        """Send the prompt and return the raw JSON text of the first choice."""
        response = self.client.chat.completions.create(
            model=self.model,
            messages=[
                {
                    "role": "user",
                    "content": prompt,
                },
            ],
            # Low temperature keeps the calls consistent between refreshes
            temperature=0.2,
            response_format={"type": "json_object"},
        )

        choices = response.choices
        if len(choices) == 0:
            return None

        return choices[0].message.content
