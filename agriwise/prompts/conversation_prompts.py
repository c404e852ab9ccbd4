CHAT_INSTRUCTION = """
Task: answer the farmer's question as their personal advisor.
- Give clear, practical, safe guidance in simple farmer-friendly words.
- Use search or maps when the answer depends on current or local information.
- Keep answers short unless the farmer asks for detail.
""".strip()

CHAT_LOCATION_TEMPLATE = "The farmer is currently at {location}."

SUMMARIZE_INSTRUCTION = """
Task: summarize the text for a farmer in at most five short bullet points.
Keep numbers, dates and dosages exactly as written.
""".strip()

# TTS models take no system instruction, so the voice style travels in the prompt.
SPEECH_STYLE = "in a calm, friendly voice"

SPEECH_USER_TEMPLATE = "Say in {language}, {style}: {text}"
