from docqa.services.answering.prompt import build_prompt
from docqa.services.answering.streamer import AnswerStreamer, extract_fragment

__all__ = ["AnswerStreamer", "build_prompt", "extract_fragment"]
