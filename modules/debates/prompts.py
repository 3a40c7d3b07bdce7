"""Prompt text for debate turns.

The system preamble frames the AI as the user's opponent. The primers are
short assistant messages appended last so the model commits to answering
in character instead of restating the previous argument.
"""

_GUIDELINES = """It's crucial to adhere to the following guidelines to maintain the debate's integrity and effectiveness:
- Stay On-Topic: Concentrate exclusively on the debate subject. Any deviation from the central topic should be avoided to maintain focus and relevance.
- Clarity and Conciseness: Your responses should be clear and to the point. Each counter-argument you present must be contained within a single, well-structured paragraph.
- Quality of Argumentation: As a professional debater, your arguments should be logical, well-reasoned, and backed by evidence or strong reasoning.
- Direct Counter-Arguments: Do not repeat or explicitly acknowledge the user's argument. Instead, immediately present your counter-argument.
- Avoid Repetition: Ensure that your counter-arguments are fresh and provide new value to the debate.
- Researcher: Provide evidence, examples, and references to support your counter-arguments.
Your goal is to enrich the debate by introducing diverse viewpoints and robust counterpoints, fostering a dynamic and insightful exchange."""


def persona_system_prompt(short_topic: str, persona: str) -> str:
    """System preamble for the AI debating in persona."""
    return (
        f"You are participating in a structured debate on the topic '{short_topic}', "
        f"adopting the debating style of '{persona}'. "
        "Your role is to present the counter-perspective against the user's stance. "
        f"{_GUIDELINES}"
    )


def against_persona_system_prompt(short_topic: str, persona: str) -> str:
    """System preamble for the AI arguing the user's side against the persona."""
    return (
        f"You are participating in a structured debate on the topic '{short_topic}', "
        f"you're debating against '{persona}'. "
        "Your role is to present the counter-perspective against the user's stance. "
        f"{_GUIDELINES}"
    )


def ai_opens_request(short_topic: str, persona: str) -> str:
    """User message asking the persona to open the debate."""
    return f"{persona}, you start the debate about {short_topic}!"


def ai_opens_primer(short_topic: str, persona: str) -> str:
    return f"Ok, I will start the debate about {short_topic} while remaining in the style of {persona}!"


def reply_to_argument_primer(short_topic: str, persona: str) -> str:
    """Primer used right after a fresh user argument."""
    return (
        f"Ok, I will now give a response to the user's argument about {short_topic} "
        f"while remaining in the style of {persona}! "
        "I will also keep it short, concise, and to the point! "
        "I will also take the opposing side of the debate against the user without repeating myself!"
    )


def counter_argument_primer(short_topic: str, persona: str) -> str:
    """Primer used when the AI answers an argument already on record."""
    return (
        f"I will now go directly into my counter argument to the user's argument about {short_topic} "
        f"while remaining in the style of {persona}! "
        "I will also keep it short, concise, and to the point! "
        "I will also take the opposing side of the debate against the user without repeating myself!"
    )


def counter_persona_primer(short_topic: str) -> str:
    """Primer used when the AI argues on the user's behalf."""
    return (
        f"I will now go directly into my counter argument to the user's argument about {short_topic}! "
        "I will also keep it short, concise, and to the point! "
        "I will also take the opposing side of the debate against the user without repeating myself!"
    )
