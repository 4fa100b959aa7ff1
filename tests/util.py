import json

SCREENPIPE_URL = "http://screenpipe.test"

SEVEN_SLIDES = {
    "slides": [
        {"title": "Welcome to your Wrapped", "content": "Hello there", "type": "text"},
        {"title": "Apps you loved", "content": "So much code", "type": "text"},
        {"title": "Where you browsed", "content": "Tabs everywhere", "type": "insight"},
        {"title": "Fun fact", "content": "You blinked twice", "type": "insight"},
        {"title": "Digital personality", "content": "The Tinkerer"},
        {"title": "Prediction", "content": "More tabs"},
        {"title": "Thanks!", "content": "See you next time", "type": "text"},
    ]
}


def ui_envelope(window_name, app_name=None):
    return {
        "type": "UI",
        "content": {"window_name": window_name, "app_name": app_name, "timestamp": "2024-05-01T10:00:00Z"},
    }


def ocr_envelope(text=None, app_name=None, window_name=None):
    return {
        "type": "OCR",
        "content": {
            "text": text,
            "app_name": app_name,
            "window_name": window_name,
            "timestamp": "2024-05-01T10:00:05Z",
        },
    }


def gemini_reply(text):
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


def slides_reply(slides=None):
    payload = json.dumps(slides if slides is not None else SEVEN_SLIDES)
    return gemini_reply("Here you go!\n```json\n" + payload + "\n```")
