from typing import Protocol


class GenerativeClient(Protocol):
    async def generate(self, prompt: str) -> str: ...
