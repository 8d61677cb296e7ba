"""
Question model and the fallback question tables.

The tables are used only when the generation collaborator cannot produce a
question batch; synthesis calls never fall back.
"""
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple

from ..config.limits import EngineLimits, DEFAULT_LIMITS


class QuestionKind(str, Enum):
    SELECT = "select"
    TEXT = "text"
    TEXTAREA = "textarea"


TOPICS: Tuple[str, ...] = ("goal", "role", "context", "output_format", "warning", "example")

# Order in which analysis categories are flattened into one question list
ANALYSIS_CATEGORIES: Tuple[str, ...] = ("goals", "context", "specificity", "format")


@dataclass(frozen=True)
class QuestionOption:
    text: str
    emoji: str = ""


@dataclass(frozen=True)
class Question:
    """One question as shown to the user. Immutable once issued."""

    key: str
    prompt_text: str
    kind: QuestionKind = QuestionKind.SELECT
    options: Tuple[QuestionOption, ...] = field(default_factory=tuple)
    allows_custom: bool = True
    topic: Optional[str] = None
    category: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "key": self.key,
            "prompt_text": self.prompt_text,
            "kind": self.kind.value,
            "options": [{"text": o.text, "emoji": o.emoji} for o in self.options],
            "allows_custom": self.allows_custom,
            "topic": self.topic,
            "category": self.category,
        }


def question_key(index: int, text: str) -> str:
    """Stable key for a generated question: index plus the first 20 characters."""
    slug = re.sub(r"\s+", "_", text[:20])
    return f"question_{index}_{slug}"


def topic_key(round_number: int, topic: str) -> str:
    return f"round{round_number}_{topic}"


def analysis_key(iteration: int, index: int, text: str) -> str:
    """Analysis questions repeat across iterations, so their keys carry the iteration."""
    return f"iter{iteration}_{question_key(index, text)}"


def _options(*pairs: Tuple[str, str]) -> Tuple[QuestionOption, ...]:
    return tuple(QuestionOption(text, emoji) for text, emoji in pairs)


DEFAULT_GUIDED_QUESTIONS: Tuple[Question, ...] = (
    Question(
        key="guided_goal",
        prompt_text="What's your main goal with this prompt?",
        options=_options(("Get quick results", "⚡"), ("Deep analysis", "🔍"),
                         ("Creative output", "🎨"), ("Problem solving", "🧩")),
    ),
    Question(
        key="guided_audience",
        prompt_text="Who is your target audience?",
        options=_options(("General audience", "👥"), ("Experts/professionals", "🎓"),
                         ("Beginners", "🌱"), ("Specific group", "🎯")),
    ),
    Question(
        key="guided_detail",
        prompt_text="What level of detail do you need?",
        options=_options(("Brief summary", "📝"), ("Moderate detail", "📄"),
                         ("Comprehensive", "📚"), ("Ultra-detailed", "🔬")),
    ),
    Question(
        key="guided_timeline",
        prompt_text="What's your timeline?",
        options=_options(("ASAP", "🚀"), ("This week", "📅"),
                         ("This month", "🗓️"), ("No rush", "🐌")),
    ),
    Question(
        key="guided_format",
        prompt_text="What format do you prefer?",
        options=_options(("Step-by-step guide", "📋"), ("Narrative format", "📖"),
                         ("Bullet points", "•"), ("Q&A format", "❓")),
    ),
)

_TOPIC_PROMPTS: Dict[int, Dict[str, Tuple[str, Tuple[QuestionOption, ...]]]] = {
    1: {
        "goal": ("What should the result achieve?", _options(
            ("Inform", "📢"), ("Persuade", "🤝"), ("Entertain", "🎭"), ("Solve a problem", "🧩"))),
        "role": ("Who should the AI act as?", _options(
            ("Expert consultant", "🎓"), ("Friendly helper", "😊"),
            ("Strict reviewer", "🧐"), ("Creative writer", "✍️"))),
        "context": ("Where will the result be used?", _options(
            ("Work", "💼"), ("Study", "📚"), ("Personal", "🏠"), ("Social media", "📱"))),
        "output_format": ("What shape should the answer take?", _options(
            ("Plain text", "📝"), ("List", "📋"), ("Table", "📊"), ("Code", "💻"))),
        "warning": ("Is there anything to avoid?", _options(
            ("Jargon", "🚫"), ("Long answers", "⏳"), ("Made-up facts", "❗"), ("Nothing special", "👌"))),
        "example": ("Do you want an example in the answer?", _options(
            ("Yes, one", "1️⃣"), ("Yes, several", "🔢"), ("No", "🙅"), ("Only if useful", "🤷"))),
    },
    2: {
        "goal": ("How will you know the result is good?", _options(
            ("It saves time", "⏱️"), ("It is accurate", "🎯"),
            ("People like it", "👍"), ("It is original", "✨"))),
        "role": ("What tone should that role use?", _options(
            ("Formal", "🎩"), ("Casual", "👕"), ("Playful", "🎈"), ("Neutral", "⚖️"))),
        "context": ("Who will read the result?", _options(
            ("Just me", "🙋"), ("My team", "👥"), ("Customers", "🛍️"), ("The public", "🌍"))),
        "output_format": ("How long should it be?", _options(
            ("A few lines", "✂️"), ("One page", "📄"), ("Several pages", "📚"), ("As needed", "📏"))),
        "warning": ("How careful should the AI be with facts?", _options(
            ("Cite sources", "🔗"), ("Flag guesses", "🚩"), ("Best effort", "🤞"), ("Not important", "🙃"))),
        "example": ("What kind of example helps most?", _options(
            ("Real world", "🌐"), ("Step by step", "🪜"), ("Before and after", "🔄"), ("Template", "🧾"))),
    },
    3: {
        "goal": ("Anything else the result must include?", _options(
            ("A summary", "🧾"), ("Next steps", "➡️"), ("Pros and cons", "⚖️"), ("Nothing else", "✅"))),
        "role": ("How much should the AI explain its reasoning?", _options(
            ("Not at all", "🤐"), ("Briefly", "💬"), ("In detail", "🔍"), ("Only when asked", "🙋"))),
        "context": ("Are there constraints to respect?", _options(
            ("Budget", "💰"), ("Deadline", "⏰"), ("Brand rules", "🏷️"), ("None", "🆓"))),
        "output_format": ("Any formatting extras?", _options(
            ("Headings", "🔠"), ("Emojis", "😀"), ("Bold key points", "🅱️"), ("Keep it plain", "⬜"))),
        "warning": ("What would make the answer useless to you?", _options(
            ("Too generic", "🌫️"), ("Too long", "📜"), ("Too technical", "⚙️"), ("Off topic", "🧭"))),
        "example": ("Should the AI ask follow-up questions?", _options(
            ("Yes", "❔"), ("No, just answer", "🏃"), ("Only if unclear", "🤔"), ("At the end", "🔚"))),
    },
}


def default_guided_questions(limits: EngineLimits = DEFAULT_LIMITS) -> List[Question]:
    return list(DEFAULT_GUIDED_QUESTIONS[:limits.guided_question_count])


def default_topic_questions(round_number: int) -> List[Question]:
    """Fallback topic questions; rounds past the table reuse the last one."""
    table = _TOPIC_PROMPTS.get(round_number) or _TOPIC_PROMPTS[max(_TOPIC_PROMPTS)]
    return [
        Question(
            key=topic_key(round_number, topic),
            prompt_text=table[topic][0],
            options=table[topic][1],
            topic=topic,
        )
        for topic in TOPICS
    ]
