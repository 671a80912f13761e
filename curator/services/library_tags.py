"""
Tag vocabularies for the three libraries.

Fiction Vault: stories, art, imagination and entertainment.
Athenaeum: humanities, social sciences, history and "deep" non-fiction.
Growth Lab: career, tech, hard skills, lifestyle and productivity.

Each library has exactly 20 tags: 4 formats, 12 subjects, 4 qualities.
"""

from __future__ import annotations

from dataclasses import dataclass

from curator.models.contracts import LibraryType


@dataclass(frozen=True)
class LibraryTag:
    name: str
    emoji: str
    synonyms: tuple[str, ...]


@dataclass(frozen=True)
class LibraryConfig:
    library_type: LibraryType
    display_name: str
    description: str
    goal: str
    tags: tuple[LibraryTag, ...]


FICTION_VAULT_TAGS: tuple[LibraryTag, ...] = (
    # Format
    LibraryTag("Novel/Book", "📖", ("novel", "book", "fiction book", "literature", "story", "narrative")),
    LibraryTag(
        "Movie/Series",
        "🎬",
        ("movie", "film", "series", "show", "tv show", "television", "cinema", "streaming"),
    ),
    LibraryTag(
        "Audio Drama",
        "🎭",
        ("audio drama", "radio drama", "fiction podcast", "narrative podcast", "audio story"),
    ),
    LibraryTag("Comic/Manga", "📚", ("comic", "manga", "graphic novel", "comic book", "webcomic", "manhwa")),
    # Genre
    LibraryTag(
        "Fantasy",
        "🧙",
        ("fantasy", "high fantasy", "magic", "wizards", "dragons", "epic fantasy", "urban fantasy"),
    ),
    LibraryTag(
        "Sci-Fi",
        "🚀",
        ("sci-fi", "science fiction", "space", "cyberpunk", "dystopia", "futuristic", "aliens"),
    ),
    LibraryTag(
        "Horror",
        "👻",
        ("horror", "supernatural", "psychological horror", "thriller horror", "scary", "terror"),
    ),
    LibraryTag(
        "Thriller/Mystery",
        "🔍",
        ("thriller", "mystery", "crime", "suspense", "detective", "whodunit", "noir"),
    ),
    LibraryTag(
        "Romance",
        "💕",
        ("romance", "love story", "contemporary romance", "historical romance", "romantic"),
    ),
    LibraryTag(
        "Historical Fic",
        "⏳",
        ("historical fiction", "historical", "period piece", "past", "historical drama"),
    ),
    LibraryTag(
        "Comedy/Satire",
        "😂",
        ("comedy", "satire", "humor", "funny", "humorous", "parody", "stand-up"),
    ),
    LibraryTag("Drama/Lit", "🎭", ("drama", "literary fiction", "serious", "character study", "literary")),
    LibraryTag("Classics", "📜", ("classics", "classic literature", "canonical", "pre-1950", "timeless")),
    LibraryTag("Young Adult", "🌟", ("young adult", "ya", "teen", "coming of age", "adolescent")),
    LibraryTag("Mythology/Lore", "⚔️", ("mythology", "myth", "lore", "legend", "folklore", "mythological")),
    LibraryTag("Art/Animation", "🎨", ("art", "animation", "visual", "animated", "art book", "illustrated")),
    # Vibe
    LibraryTag(
        "Fast Paced",
        "⚡",
        ("fast paced", "page-turner", "action-packed", "thrilling", "intense", "gripping"),
    ),
    LibraryTag("Slow Burn", "🕯️", ("slow burn", "atmospheric", "slow-paced", "contemplative", "gradual")),
    LibraryTag(
        "Emotional",
        "😢",
        ("emotional", "tear-jerker", "moving", "heartbreaking", "touching", "poignant"),
    ),
    LibraryTag(
        "Masterpiece",
        "⭐",
        ("masterpiece", "perfect", "10/10", "must-read", "must-watch", "essential", "classic"),
    ),
)

ATHENAEUM_TAGS: tuple[LibraryTag, ...] = (
    # Format
    LibraryTag("Book", "📕", ("non-fiction book", "nonfiction", "educational book", "informative book")),
    LibraryTag(
        "Podcast",
        "🎙️",
        ("educational podcast", "interview", "talk show", "discussion", "conversation"),
    ),
    LibraryTag("Essay/Paper", "📄", ("essay", "paper", "article", "academic", "long-read", "publication")),
    LibraryTag(
        "Documentary",
        "🎥",
        ("documentary", "doc", "educational video", "nonfiction film", "informative video"),
    ),
    # Subject
    LibraryTag(
        "History",
        "🏛️",
        ("history", "historical", "ancient", "modern history", "past events", "civilization"),
    ),
    LibraryTag(
        "Philosophy",
        "🤔",
        ("philosophy", "ethics", "logic", "existentialism", "metaphysics", "philosophical"),
    ),
    LibraryTag(
        "Psychology",
        "🧠",
        ("psychology", "behavior", "mind", "cognitive", "mental processes", "psychological"),
    ),
    LibraryTag(
        "Politics/Society",
        "🏛️",
        ("politics", "society", "current events", "sociology", "social issues", "government"),
    ),
    LibraryTag(
        "Anthropology",
        "🌍",
        ("anthropology", "culture", "cultures", "religion", "human societies", "ethnography"),
    ),
    LibraryTag(
        "Hard Science",
        "🔬",
        ("science", "physics", "biology", "chemistry", "mathematics", "nature", "scientific"),
    ),
    LibraryTag(
        "True Crime",
        "🔪",
        ("true crime", "crime", "investigative journalism", "murder", "criminal justice"),
    ),
    LibraryTag("Biography", "👤", ("biography", "memoir", "autobiography", "life story", "biographical")),
    LibraryTag(
        "Literature Analysis",
        "📖",
        ("literature analysis", "literary criticism", "book analysis", "literary theory"),
    ),
    LibraryTag("Art History", "🖼️", ("art history", "art", "artistic movements", "artists", "visual arts")),
    LibraryTag(
        "Linguistics/Lang",
        "🗣️",
        ("linguistics", "language", "languages", "communication", "linguistic"),
    ),
    LibraryTag(
        "Fringe/Mystery",
        "👽",
        ("fringe", "mystery", "unexplained", "paranormal", "conspiracy", "mysterious phenomena"),
    ),
    # Depth
    LibraryTag("Academic", "🎓", ("academic", "scholarly", "dense", "rigorous", "complex", "technical")),
    LibraryTag(
        "Intro/Pop",
        "📘",
        ("intro", "introduction", "pop science", "popular", "accessible", "beginner-friendly"),
    ),
    LibraryTag(
        "Deep Dive",
        "🕳️",
        ("deep dive", "long-form", "in-depth", "comprehensive", "thorough", "detailed"),
    ),
    LibraryTag(
        "Hot Topic",
        "🔥",
        ("hot topic", "trending", "current", "debated", "controversial", "topical"),
    ),
)

GROWTH_LAB_TAGS: tuple[LibraryTag, ...] = (
    # Format
    LibraryTag("Book", "📗", ("manual", "guide", "self-help book", "how-to book", "instructional")),
    LibraryTag("Podcast", "🎧", ("tech podcast", "business podcast", "hustle pod", "interview podcast")),
    LibraryTag(
        "Video/Course",
        "🎬",
        ("tutorial", "course", "video tutorial", "how-to video", "online course", "training"),
    ),
    LibraryTag(
        "Tool/Resource",
        "🛠️",
        ("tool", "resource", "app", "website", "software", "platform", "repository"),
    ),
    # Subject
    LibraryTag(
        "Tech & Code",
        "💻",
        ("tech", "technology", "code", "coding", "programming", "development", "software", "ai"),
    ),
    LibraryTag(
        "Business/Econ",
        "💼",
        ("business", "economics", "startup", "entrepreneurship", "commerce", "economy"),
    ),
    LibraryTag(
        "Finance",
        "💰",
        ("finance", "investing", "investment", "crypto", "personal finance", "money", "wealth"),
    ),
    LibraryTag(
        "Marketing/Create",
        "📱",
        ("marketing", "social media", "content creation", "advertising", "branding", "creator"),
    ),
    LibraryTag(
        "Productivity",
        "⚡",
        ("productivity", "efficiency", "time management", "organization", "gtd", "systems"),
    ),
    LibraryTag(
        "Leadership",
        "👔",
        ("leadership", "management", "soft skills", "team building", "executive"),
    ),
    LibraryTag(
        "Health & Fitness",
        "💪",
        ("health", "fitness", "gym", "exercise", "workout", "training", "biohacking", "wellness"),
    ),
    LibraryTag(
        "Mental Health",
        "🧘",
        ("mental health", "mindfulness", "meditation", "therapy", "stress management", "coping"),
    ),
    LibraryTag(
        "Food/Cooking",
        "🍳",
        ("food", "cooking", "nutrition", "diet", "recipes", "culinary", "meal prep"),
    ),
    LibraryTag(
        "Travel/Digital Nomad",
        "✈️",
        ("travel", "digital nomad", "remote work", "nomad", "wanderlust", "adventure"),
    ),
    LibraryTag("DIY/Home", "🏠", ("diy", "home", "home improvement", "crafts", "handyman", "maker")),
    LibraryTag(
        "Style/Design",
        "👗",
        ("style", "design", "fashion", "aesthetics", "interior design", "visual design"),
    ),
    # Level
    LibraryTag("Beginner", "🌱", ("beginner", "start here", "intro", "basics", "fundamentals", "novice")),
    LibraryTag(
        "Advanced",
        "🚀",
        ("advanced", "expert", "professional", "sophisticated", "complex", "high-level"),
    ),
    LibraryTag("Quick Tip", "⏱️", ("quick tip", "short", "brief", "summary", "tldr", "quick win")),
    LibraryTag(
        "Gold Standard",
        "🏆",
        ("gold standard", "best", "industry standard", "definitive", "authoritative", "top-tier"),
    ),
)

LIBRARIES: dict[LibraryType, LibraryConfig] = {
    LibraryType.FICTION: LibraryConfig(
        library_type=LibraryType.FICTION,
        display_name="Fiction Vault",
        description="Stories, Art, Imagination, and Entertainment",
        goal="I want to be entertained or immersed in a story.",
        tags=FICTION_VAULT_TAGS,
    ),
    LibraryType.ATHENAEUM: LibraryConfig(
        library_type=LibraryType.ATHENAEUM,
        display_name="Athenaeum",
        description='Humanities, Social Sciences, History, and "Deep" Non-Fiction',
        goal="I want to understand the world, the past, or the human mind.",
        tags=ATHENAEUM_TAGS,
    ),
    LibraryType.GROWTH: LibraryConfig(
        library_type=LibraryType.GROWTH,
        display_name="Growth Lab",
        description="Career, Tech, Hard Skills, Lifestyle, and Productivity",
        goal="I want to upgrade my life, my job, or my skills.",
        tags=GROWTH_LAB_TAGS,
    ),
}


def get_library(library_type: LibraryType | str) -> LibraryConfig:
    """Raises ValueError for names outside the three libraries."""
    return LIBRARIES[LibraryType(library_type)]


def get_library_tag_names(library_type: LibraryType | str) -> list[str]:
    return [tag.name for tag in get_library(library_type).tags]


def find_library_tag(name: str, library_type: LibraryType | str) -> LibraryTag | None:
    """Case-insensitive exact lookup of a vocabulary tag."""
    lowered = name.strip().lower()
    for tag in get_library(library_type).tags:
        if tag.name.lower() == lowered:
            return tag
    return None


def get_tag_emoji(name: str, library_type: LibraryType | str) -> str | None:
    tag = find_library_tag(name, library_type)
    return tag.emoji if tag else None
