"""
Static site content: per-program extras, projects, the photo gallery, blog
categories, the about page and the seed records for a fresh database.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

# ─────────────────────────────────────────────────────────────
# Program detail extras
# ─────────────────────────────────────────────────────────────
@dataclass(frozen=True)
class Stat:
    label: str
    value: str


@dataclass(frozen=True)
class ProgramExtra:
    long_description: str
    objectives: Tuple[str, ...]
    impact_areas: Tuple[str, ...]
    stats: Tuple[Stat, ...]


DEFAULT_EXTRA = ProgramExtra(
    long_description=(
        "This program is designed to create sustainable, community-led change through training, "
        "advocacy, and direct support. We work closely with local leaders and beneficiaries to "
        "ensure every activity responds to real needs on the ground."
    ),
    objectives=(
        "Provide targeted support to the most vulnerable community members",
        "Build local capacity through training and mentorship",
        "Create sustainable systems that continue beyond project funding",
    ),
    impact_areas=(
        "Community awareness and mobilization",
        "Partnerships with local organizations",
        "Long-term resilience and self-reliance",
    ),
    stats=(
        Stat("People Reached", "1,500+"),
        Stat("Communities", "10+"),
        Stat("Active Projects", "3"),
    ),
)

PROGRAM_EXTRAS: Dict[str, ProgramExtra] = {
    "Women's Economic Empowerment": ProgramExtra(
        long_description=(
            "The Women's Economic Empowerment Program supports women to start and grow small "
            "businesses, access savings and credit, and build the confidence to participate in "
            "decision-making at home and in the community. We combine practical business skills "
            "with rights awareness and peer support groups."
        ),
        objectives=(
            "Train women in basic business, marketing, and financial management",
            "Increase access to savings groups and small loans",
            "Strengthen women's leadership and voice in household and community decisions",
        ),
        impact_areas=(
            "Income generation and livelihoods",
            "Financial inclusion and savings culture",
            "Women's rights and leadership",
        ),
        stats=(
            Stat("Women Trained", "800+"),
            Stat("Businesses Started", "250+"),
            Stat("Savings Groups", "35"),
        ),
    ),
    "Youth Development & Education": ProgramExtra(
        long_description=(
            "Our Youth Development & Education Program invests in the next generation through "
            "tutoring, life-skills training, and mentorship. We help young people stay in school, "
            "discover their talents, and transition into decent work opportunities."
        ),
        objectives=(
            "Improve learning outcomes and school retention",
            "Equip youth with life skills and digital literacy",
            "Connect young people to mentorship, internships, and job pathways",
        ),
        impact_areas=(
            "After-school tutoring and remedial classes",
            "Digital skills and career guidance",
            "Youth leadership and peer-to-peer mentoring",
        ),
        stats=(
            Stat("Students Reached", "1,200+"),
            Stat("Scholarships", "95"),
            Stat("Youth Clubs", "20"),
        ),
    ),
    "Community Health Initiatives": ProgramExtra(
        long_description=(
            "The Community Health Initiatives Program focuses on preventive health, maternal and "
            "child care, and access to basic services. We train community health volunteers, run "
            "outreach clinics, and link families to local health facilities."
        ),
        objectives=(
            "Increase awareness of key health and hygiene practices",
            "Support mothers and children with essential health services",
            "Strengthen community linkages with health facilities and providers",
        ),
        impact_areas=(
            "Health education and awareness campaigns",
            "Maternal and child health support",
            "Water, sanitation, and hygiene (WASH)",
        ),
        stats=(
            Stat("People Reached", "2,000+"),
            Stat("Health Sessions", "150+"),
            Stat("Community Volunteers", "60+"),
        ),
    ),
}

# Program title -> donation program enum
TITLE_TO_DONATION_PROGRAM: Dict[str, str] = {
    "Women's Economic Empowerment": "general",
    "Youth Development & Education": "education",
    "Community Health Initiatives": "healthcare",
}


def extra_for(title: Optional[str]) -> ProgramExtra:
    if title is None:
        return DEFAULT_EXTRA
    return PROGRAM_EXTRAS.get(title, DEFAULT_EXTRA)


def donation_program_for(title: Optional[str]) -> str:
    if title is None:
        return "general"
    return TITLE_TO_DONATION_PROGRAM.get(title, "general")


# ─────────────────────────────────────────────────────────────
# Projects + gallery
# ─────────────────────────────────────────────────────────────
PROJECT_IMAGE = "/static/img/project.svg"


@dataclass(frozen=True)
class Project:
    id: int
    title: str
    category: str
    description: str
    duration: str
    beneficiaries: str
    partners: str
    outcomes: str
    image: str = PROJECT_IMAGE


PROJECTS: Tuple[Project, ...] = (
    Project(
        id=1,
        title="Women's Literacy & Skills Development",
        category="Education",
        description=(
            "A comprehensive program providing adult literacy classes and vocational skills training "
            "to women in rural communities, enabling economic independence and community leadership."
        ),
        duration="2022 - Present",
        beneficiaries="5,000+ women",
        partners="Local Education Authority, Women's Cooperative",
        outcomes="85% participants now literate, 60% started small businesses",
    ),
    Project(
        id=2,
        title="Youth Leadership Academy",
        category="Youth Development",
        description=(
            "An intensive leadership and entrepreneurship training program for young people aged "
            "18-25, equipping them with skills to become change-makers in their communities."
        ),
        duration="2021 - Present",
        beneficiaries="2,500+ youth",
        partners="University Partnership, Business Incubators",
        outcomes="200+ youth-led initiatives launched, 75% employment rate",
    ),
    Project(
        id=3,
        title="Community Health Champions",
        category="Health",
        description=(
            "Training community health volunteers to provide essential healthcare education and "
            "services in underserved areas, improving health outcomes and awareness."
        ),
        duration="2020 - Present",
        beneficiaries="25,000+ community members",
        partners="Ministry of Health, Local Clinics",
        outcomes="40% reduction in preventable diseases, 150 trained health volunteers",
    ),
)


class Gallery:
    """Lightbox navigation over a fixed list of images; prev/next wrap around."""

    def __init__(self, images: Sequence[str]):
        self.images = tuple(images)

    def __len__(self) -> int:
        return len(self.images)

    def selected(self, index: Optional[int]) -> Optional[int]:
        """The open index, or None when closed or out of range."""
        if index is None or not self.images:
            return None
        if 0 <= index < len(self.images):
            return index
        return None

    def prev(self, index: int) -> int:
        return len(self.images) - 1 if index == 0 else index - 1

    def next(self, index: int) -> int:
        return 0 if index == len(self.images) - 1 else index + 1


GALLERY = Gallery([PROJECT_IMAGE] * 6)


# ─────────────────────────────────────────────────────────────
# Blog
# ─────────────────────────────────────────────────────────────
BLOG_CATEGORIES: Tuple[str, ...] = (
    "All",
    "Education",
    "Youth",
    "Health",
    "Empowerment",
    "Gender",
    "Development",
)


def filter_by_category(posts: Iterable[Any], category: Optional[str]) -> List[Any]:
    if category is None or category == "All":
        return list(posts)
    wanted = category.strip().lower()
    return [p for p in posts if p.category.strip().lower() == wanted]


# ─────────────────────────────────────────────────────────────
# About
# ─────────────────────────────────────────────────────────────
ABOUT = {
    "mission": (
        "To empower women, youth and vulnerable communities through education, health and "
        "economic opportunity, so that every person can live with dignity and purpose."
    ),
    "vision": "Thriving, self-reliant communities where everyone has the chance to reach their full potential.",
    "values": (
        ("Community first", "Programs are designed with, not for, the people they serve."),
        ("Integrity", "We are transparent about how every contribution is used."),
        ("Inclusion", "Women, girls and young people are at the center of our work."),
        ("Sustainability", "We build local capacity that lasts beyond project funding."),
    ),
}


# ─────────────────────────────────────────────────────────────
# Seed records (flask seed-content)
# ─────────────────────────────────────────────────────────────
SEED_PROGRAMS: Tuple[Dict[str, str], ...] = (
    {
        "title": "Women's Economic Empowerment",
        "category": "Empowerment",
        "description": "Business skills, savings groups and leadership support for women entrepreneurs.",
        "image": "/static/img/program-empowerment.svg",
    },
    {
        "title": "Youth Development & Education",
        "category": "Education",
        "description": "Tutoring, life skills and mentorship that keep young people learning and earning.",
        "image": "/static/img/program-youth.svg",
    },
    {
        "title": "Community Health Initiatives",
        "category": "Health",
        "description": "Preventive care, maternal health and outreach clinics for underserved families.",
        "image": "/static/img/program-health.svg",
    },
)

SEED_BLOG_POSTS: Tuple[Dict[str, Any], ...] = (
    {
        "title": "Empowering Women through Rural Education Programs",
        "category": "Education",
        "excerpt": (
            "Our rural education initiative is unlocking opportunities for young women by "
            "providing access to quality learning..."
        ),
        "content": (
            "Access to education transforms lives, especially for women in rural areas.\n\n"
            "Our program focuses on:\n• Adult literacy classes\n• Digital skill training\n"
            "• Scholarships for girls\n\n"
            "These women are now running small businesses, joining local councils, and inspiring "
            "others to dream bigger.\n\n"
            "One participant, Amina, says:\n"
            "“Education gave me the power to stand up for my rights and help other women.”\n\n"
            "This initiative will be extended to 3 more villages in the coming months."
        ),
        "readTime": 5,
        "publishedAt": "2025-02-10T10:00:00Z",
    },
    {
        "title": "Health Camps Reached 4,200 Families Last Month",
        "category": "Health",
        "excerpt": "Mobile health camps are bringing critical medical services to remote communities...",
        "content": (
            "In remote regions where hospitals are far away, our mobile health camps are a lifesaver.\n\n"
            "Last month alone:\n• 4,200 families served\n• 800 children vaccinated\n"
            "• 350 prenatal checkups\n\n"
            "Volunteer doctors, nurses, and local health workers are making a tremendous difference.\n\n"
            "Our next goal: Provide basic medical insurance to 1,000 families."
        ),
        "readTime": 4,
        "publishedAt": "2025-02-05T08:00:00Z",
    },
    {
        "title": "Youth Leadership Program Expands Nationwide",
        "category": "Youth",
        "excerpt": "The youth leadership initiative is now active in 12 districts with over 600 participants...",
        "content": (
            "Tomorrow's leaders are being shaped today.\n\n"
            "The Youth Leadership Program trains students in:\n• Public speaking\n"
            "• Community organizing\n• Problem-solving\n• Entrepreneurship\n\n"
            "65% of participants have already launched local initiatives like clean water "
            "projects, tutoring centers, and youth clubs."
        ),
        "readTime": 3,
        "publishedAt": "2025-02-01T07:30:00Z",
    },
)
