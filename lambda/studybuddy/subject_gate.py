"""
Subject gate for the Study Buddy tutor.

Decides whether a free-text doubt is something the tutor should answer.
The check is plain substring matching over curated phrase lists:

1. Inputs shorter than 3 characters are rejected.
2. An off-topic phrase (movies, celebrities, sports, gaming, ...) rejects
   the input unless a general academic phrase ("explain", "how does",
   "formula", ...) is also present.
3. Everything else is accepted. Matching a subject keyword for the
   student's curriculum confirms the input, but inputs that match
   nothing are accepted too.
"""

from dataclasses import dataclass

from studybuddy.curriculum import subjects_for

OFF_TOPIC_KEYWORDS: list[str] = [
    # Movies/TV
    "movie", "movies", "film", "netflix", "disney", "marvel", "dc", "avengers",
    "stranger things", "squid game", "anime", "series", "episode", "season",
    "hollywood", "bollywood", "actor", "actress", "director",
    # Celebrities
    "celebrity", "celebrities", "virat", "kohli", "messi", "ronaldo", "shah rukh",
    "srk", "selena", "taylor swift", "bts", "blackpink", "influencer", "youtuber",
    "tiktoker", "instagram", "famous", "star",
    # Sports (non-academic)
    "cricket", "football", "soccer", "basketball", "ipl", "world cup", "match score",
    "live score", "tournament", "fifa", "nba", "nfl", "player stats", "team",
    "league", "premier league", "champions league",
    # Gaming
    "fortnite", "pubg", "minecraft", "valorant", "gta", "call of duty", "cod",
    "xbox", "playstation", "ps5", "nintendo", "gaming tips", "cheats", "walkthrough",
    "free fire", "roblox", "apex legends", "video game",
    # News/Trends
    "news", "trending", "viral", "meme", "memes", "gossip", "scandal", "politics",
    "election", "controversy", "rumor", "drama",
    # Food/Fashion
    "recipe", "cooking tips", "restaurant", "food review", "makeup", "fashion tips",
    "outfit", "style tips", "beauty tips", "skincare routine", "diet plan",
    # Music
    "song lyrics", "spotify", "concert", "music video", "album", "playlist",
    "latest song", "new release", "singer", "band",
    # Travel
    "travel tips", "hotel", "vacation", "tourist", "holiday destination",
    "flight booking", "best places to visit",
    # Social media
    "followers", "likes", "viral video", "tiktok", "reels", "shorts",
    # Dating/Relationships
    "dating", "crush", "relationship advice", "breakup", "love life",
]

GENERAL_ACADEMIC_KEYWORDS: list[str] = [
    # Learning verbs
    "study", "learn", "understand", "explain", "teach", "clarify", "describe",
    "define", "solve", "calculate", "prove", "derive", "analyze", "compare",
    # Question stems
    "how do", "how does", "how to", "what is", "what are", "why do", "why does",
    "why is", "when do", "where do", "which", "can you explain", "help me",
    "i don't understand", "confused about", "stuck on",
    # Academic terms
    "homework", "assignment", "exam", "test", "quiz", "question", "problem",
    "exercise", "chapter", "lesson", "topic", "concept", "theory", "formula",
    "equation", "theorem", "principle", "law", "rule", "definition",
    # Academic actions
    "doubt", "doubts", "practice", "revision", "notes", "summary", "example",
    "examples", "steps", "method", "solution", "answer", "hint", "tip",
]

SUBJECT_KEYWORDS: dict[str, list[str]] = {
    "Mathematics": [
        "math", "fraction", "algebra", "geometry", "trigonometry", "calculus",
        "equation", "polynomial", "derivative", "integral", "matrix", "vector",
        "number", "digit", "divide", "multiply", "add", "subtract", "percent",
        "probability", "statistics", "mean", "median", "mode", "ratio", "proportion",
        "angle", "triangle", "quadrilateral", "circle", "perimeter", "area", "volume",
        "root", "exponent", "power", "variable", "constant", "integer",
        "decimal", "percentage", "compound interest", "profit", "loss", "discount",
        "hcf", "lcm", "pythagoras", "congruence", "construction", "mensuration",
    ],
    "Science": [
        "science", "physics", "chemistry", "biology", "atom", "molecule",
        "element", "compound", "reaction", "force", "energy", "motion",
        "light", "electricity", "magnet", "cell", "organism", "evolution",
        "photosynthesis", "respiration", "digestion", "sound", "heat", "temperature",
        "pressure", "density", "gravity", "friction", "acceleration", "velocity",
        "metal", "nonmetal", "acid", "base", "salt", "oxide",
        "microorganism", "bacteria", "virus", "disease", "health", "nutrition",
        "ecosystem", "environment", "pollution", "climate", "weather", "water cycle",
        "fossil", "mineral", "rock", "soil", "atmosphere", "reflection", "refraction",
        "magnetic field", "electric current", "circuit", "conductor", "insulator",
        "skeleton", "muscle", "nerve", "blood", "heart", "lung", "brain",
    ],
    "English": [
        "english", "grammar", "literature", "essay", "poem", "novel",
        "story", "noun", "verb", "adjective", "pronoun", "tense",
        "comprehension", "vocabulary", "writing", "reading", "punctuation",
        "sentence", "paragraph", "dialogue", "speech", "article", "preposition",
        "adverb", "conjunction", "present tense", "past tense",
        "future tense", "active voice", "passive voice", "subject", "predicate",
        "rhyme", "stanza", "verse", "prose", "character", "plot", "theme",
    ],
    "Marathi": [
        "marathi", "marathi essay", "marathi grammar", "marathi literature",
        "marathi poem", "marathi story", "marathi language", "marathi writing",
        "marathi composition", "marathi translation", "marathi dictionary",
    ],
    "Hindi": [
        "hindi", "hindi grammar", "hindi essay", "hindi literature",
        "hindi poem", "hindi story", "hindi language", "hindi writing",
        "hindi composition", "hindi translation", "hindi vocabulary",
    ],
    "History": [
        "history", "ancient", "medieval", "modern", "empire", "kingdom",
        "war", "battle", "ruler", "king", "emperor", "dynasty",
        "civilization", "era", "period", "monument", "artifact", "colonial",
        "independence", "freedom struggle", "mughal", "british", "british india",
        "independence movement", "mahatma gandhi", "constitution", "parliament",
        "government", "rights", "duties", "citizenship", "1857 revolt",
        "non-cooperation movement", "civil disobedience", "revolutionary",
    ],
    "Geography": [
        "geography", "map", "location", "country", "city", "continent",
        "climate", "weather", "mountain", "river", "ocean", "terrain",
        "population", "culture", "latitude", "longitude", "coordinates",
        "landform", "plateau", "valley", "coast", "desert", "forest",
        "agriculture", "industry", "trade", "settlement", "natural resources",
        "ecosystem", "environment", "soil", "rock", "mineral", "fossil",
        "weather systems", "clouds", "humidity", "temperature", "wind",
        "ocean current", "tide", "season", "climate zone", "biome",
    ],
    "Social Studies": [
        "history", "geography", "civics", "government", "constitution",
        "law", "rights", "duties", "citizenship", "parliament", "democracy",
        "monarchy", "republic", "president", "minister", "lok sabha",
        "rajya sabha", "election", "voting", "amendment", "article", "schedule",
    ],
    "Computer Science": [
        "computer", "programming", "python", "java", "code", "algorithm",
        "data structure", "database", "network", "software", "hardware",
        "binary", "logic", "function", "variable", "loop", "array",
        "coding", "debug", "compiler", "system", "application", "internet",
        "web", "server", "client", "protocol", "security", "password",
    ],
    "Physical Education": [
        "physical education", "sports", "exercise", "fitness", "yoga",
        "health", "nutrition", "diet", "skill", "agility", "strength",
        "game", "athletics", "stretching", "running", "jumping",
        "flexibility", "endurance", "coordination",
    ],
    "Art Education": [
        "art", "drawing", "painting", "sculpture", "craft", "design",
        "color", "sketch", "canvas", "brushwork", "perspective", "shading",
        "composition", "medium", "technique", "visual", "creative", "expression",
    ],
}

# Curriculum subject names that share another subject's keyword list
SUBJECT_ALIASES: dict[str, str] = {
    "History and Civics": "History",
    "Environmental Studies - Part I": "Science",
    "Environmental Studies - Part II": "History",
}

# Friendly category names for rejection messages, keyed by off-topic phrase
OFF_TOPIC_CATEGORIES: dict[str, str] = {
    "movie": "movies and entertainment",
    "netflix": "streaming shows",
    "marvel": "superhero movies",
    "anime": "anime and cartoons",
    "cricket": "sports",
    "football": "sports",
    "ipl": "sports tournaments",
    "fortnite": "video games",
    "pubg": "video games",
    "minecraft": "video games",
    "tiktok": "social media",
}

DEFAULT_OFF_TOPIC_CATEGORY = "non-academic topics"

GREETINGS = ["hi", "hello", "hey", "hii", "hiii", "yo", "sup", "hola", "good morning"]

MIN_QUESTION_LENGTH = 3

TOO_SHORT_MESSAGE = "Please ask a complete question so I can help you better!"

OFF_TOPIC_MESSAGE = (
    "Oops, that's outside my tutor lane! I'm your study buddy, here to help with "
    "maths problems, science concepts, language and grammar doubts, history, "
    "geography and more. I can't help with {category}, but I'd love to help "
    "with your studies. What would you like to learn today?"
)


@dataclass
class ValidationContext:
    """Who is asking: the student's grade and board, and the open subject."""

    grade: str | None = None
    board: str | None = None
    subject: str | None = None


@dataclass
class ValidationResult:
    """Outcome of the gate. reason is "too_short" or "off_topic" when rejected."""

    is_valid: bool
    reason: str | None = None
    rejection_message: str | None = None
    matched_keyword: str | None = None


def _find_match(text: str, keywords: list[str]) -> str | None:
    return next((keyword for keyword in keywords if keyword in text), None)


def get_off_topic_message(keyword: str) -> str:
    """Build a friendly rejection message for the matched off-topic phrase."""
    category = OFF_TOPIC_CATEGORIES.get(keyword, DEFAULT_OFF_TOPIC_CATEGORY)
    return OFF_TOPIC_MESSAGE.format(category=category)


def build_allowed_keywords(context: ValidationContext | None) -> list[str]:
    """
    Build the allow-list for a student.

    General academic phrases plus the keyword lists of every subject the
    student's board and grade study. Without board and grade, the keyword
    lists of all known subjects are allowed.
    """
    allowed = list(GENERAL_ACADEMIC_KEYWORDS)

    if context is None or not (context.board and context.grade):
        for keywords in SUBJECT_KEYWORDS.values():
            allowed.extend(keywords)
        return allowed

    for subject in subjects_for(context.board, context.grade):
        if subject in SUBJECT_KEYWORDS:
            allowed.extend(SUBJECT_KEYWORDS[subject])
        elif SUBJECT_ALIASES.get(subject) in SUBJECT_KEYWORDS:
            allowed.extend(SUBJECT_KEYWORDS[SUBJECT_ALIASES[subject]])
        else:
            allowed.append(subject.lower())

    return allowed


def validate_question(question: str, context: ValidationContext | None = None) -> ValidationResult:
    """
    Check whether a doubt is in scope for the tutor.

    Args:
        question: The student's free-text doubt.
        context: Grade, board and subject of the student, if known.

    Returns:
        A ValidationResult; rejected results carry a user-facing message.
    """
    text = question.lower().strip()

    if len(text) < MIN_QUESTION_LENGTH:
        return ValidationResult(
            is_valid=False,
            reason="too_short",
            rejection_message=TOO_SHORT_MESSAGE,
        )

    off_topic = _find_match(text, OFF_TOPIC_KEYWORDS)
    if off_topic and _find_match(text, GENERAL_ACADEMIC_KEYWORDS) is None:
        return ValidationResult(
            is_valid=False,
            reason="off_topic",
            rejection_message=get_off_topic_message(off_topic),
        )

    # Inputs matching nothing are accepted too: an oddly phrased but
    # harmless question must not be blocked.
    allowed = [keyword.lower() for keyword in build_allowed_keywords(context)]
    return ValidationResult(is_valid=True, matched_keyword=_find_match(text, allowed))


def is_greeting(message: str) -> bool:
    """Quick check whether a message is a greeting or too short to be a doubt."""
    text = message.lower().strip()
    return text in GREETINGS or len(text) <= 2
