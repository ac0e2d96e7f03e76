"""
Keyword-matched canned answers for the mock AI nutrition assistant.

Each topic lists trigger keywords (accent-free, lowercase) and one answer
per supported language. Topics are tried in order; the first one with a
keyword present in the message wins.
"""
import re
import unicodedata
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple


@dataclass(frozen=True)
class CannedAnswer:
    message: str
    suggested_queries: Tuple[str, ...]


@dataclass(frozen=True)
class ChatTopic:
    name: str
    keywords: Tuple[str, ...]
    answers: Dict[str, CannedAnswer]


def normalize_message(text: str) -> str:
    """Lowercase and strip accents so 'Protéines' matches 'proteine'."""
    decomposed = unicodedata.normalize("NFKD", text or "")
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return stripped.lower()


CHAT_TOPICS: List[ChatTopic] = [
    ChatTopic(
        name="protein",
        keywords=("proteine", "protein", "muscle"),
        answers={
            "fr": CannedAnswer(
                "Pour un cycliste, visez 1,4 à 1,8 g de protéines par kg de poids "
                "corporel et par jour. Répartissez-les sur 4 à 5 prises, avec 20 à 25 g "
                "dans les 30 minutes qui suivent une séance difficile.",
                (
                    "Quelles sources de protéines végétales me conseilles-tu ?",
                    "Que manger juste après une sortie longue ?",
                ),
            ),
            "en": CannedAnswer(
                "As a cyclist, aim for 1.4 to 1.8 g of protein per kg of body weight "
                "per day. Spread it over 4 to 5 servings, with 20 to 25 g within 30 "
                "minutes of a hard session.",
                (
                    "Which plant-based protein sources do you recommend?",
                    "What should I eat right after a long ride?",
                ),
            ),
        },
    ),
    ChatTopic(
        name="hydration",
        keywords=("hydrat", "boire", "eau", "drink", "water", "electrolyt"),
        answers={
            "fr": CannedAnswer(
                "Buvez 500 à 750 ml par heure d'effort, davantage par forte chaleur. "
                "Au-delà d'une heure, ajoutez des électrolytes (sodium surtout) pour "
                "limiter les crampes.",
                (
                    "Comment préparer une boisson d'effort maison ?",
                    "Comment savoir si je suis déshydraté ?",
                ),
            ),
            "en": CannedAnswer(
                "Drink 500 to 750 ml per hour of riding, more in hot weather. Past the "
                "first hour, add electrolytes (mostly sodium) to keep cramps away.",
                (
                    "How do I make a homemade sports drink?",
                    "How can I tell if I'm dehydrated?",
                ),
            ),
        },
    ),
    ChatTopic(
        name="recovery",
        keywords=("recup", "recover", "apres", "after", "courbature", "sore"),
        answers={
            "fr": CannedAnswer(
                "Après l'effort, associez glucides et protéines (ratio 3:1 environ) "
                "dans l'heure : un smoothie lait-banane-flocons d'avoine ou un bol riz "
                "et poulet reconstituent vos réserves de glycogène.",
                (
                    "Quel est le meilleur repas du soir après une sortie intense ?",
                    "Les compléments de récupération sont-ils utiles ?",
                ),
            ),
            "en": CannedAnswer(
                "After riding, combine carbohydrates and protein (roughly 3:1) within "
                "the hour: a milk, banana and oat smoothie or a rice and chicken bowl "
                "refills your glycogen stores.",
                (
                    "What's the best dinner after a hard ride?",
                    "Are recovery supplements worth it?",
                ),
            ),
        },
    ),
    ChatTopic(
        name="climbing",
        keywords=("col", "montee", "ascension", "climb", "mountain", "tourmalet"),
        answers={
            "fr": CannedAnswer(
                "Pour un col, chargez en glucides à index glycémique bas la veille, "
                "prenez un petit-déjeuner riche en glucides 3 h avant, puis 60 à 90 g "
                "de glucides par heure pendant la montée (gels, barres, boisson).",
                (
                    "Combien de gels emporter pour le Tourmalet ?",
                    "Comment gérer la descente après un col ?",
                ),
            ),
            "en": CannedAnswer(
                "Before a big climb, load up on low-GI carbohydrates the day before, "
                "eat a carb-rich breakfast 3 hours ahead, then take 60 to 90 g of "
                "carbohydrates per hour on the ascent (gels, bars, drink).",
                (
                    "How many gels should I carry for a long climb?",
                    "How should I fuel on the descent?",
                ),
            ),
        },
    ),
    ChatTopic(
        name="pre_ride",
        keywords=("avant", "before", "petit-dejeuner", "breakfast", "pre"),
        answers={
            "fr": CannedAnswer(
                "Deux à trois heures avant de rouler, privilégiez un repas riche en "
                "glucides complexes et pauvre en fibres et en graisses : porridge, pain "
                "complet et miel, ou riz. Un en-cas léger 30 minutes avant suffit.",
                (
                    "Que manger si je roule tôt le matin ?",
                    "Le café avant une sortie, bonne idée ?",
                ),
            ),
            "en": CannedAnswer(
                "Two to three hours before riding, go for a meal rich in complex "
                "carbohydrates and low in fibre and fat: porridge, wholegrain toast "
                "with honey, or rice. A light snack 30 minutes before is enough.",
                (
                    "What should I eat for an early morning ride?",
                    "Is coffee before a ride a good idea?",
                ),
            ),
        },
    ),
    ChatTopic(
        name="weight",
        keywords=("poids", "maigrir", "weight", "perdre", "lose", "calorie"),
        answers={
            "fr": CannedAnswer(
                "Pour perdre du poids sans perdre en performance, limitez le déficit à "
                "300-500 kcal par jour, jamais les jours d'entraînement intense, et "
                "gardez un apport en protéines élevé.",
                (
                    "Combien de calories je brûle sur une sortie de 3 h ?",
                    "Peut-on rouler à jeun pour perdre du poids ?",
                ),
            ),
            "en": CannedAnswer(
                "To lose weight without losing power, keep the deficit to 300-500 kcal "
                "a day, never on hard training days, and keep protein intake high.",
                (
                    "How many calories do I burn on a 3-hour ride?",
                    "Is fasted riding a good way to lose weight?",
                ),
            ),
        },
    ),
]

FALLBACK_ANSWERS: Dict[str, CannedAnswer] = {
    "fr": CannedAnswer(
        "Je peux vous aider sur la nutrition du cycliste : protéines, hydratation, "
        "récupération, préparation d'un col ou gestion du poids. Que souhaitez-vous "
        "savoir ?",
        (
            "Combien de protéines dois-je consommer ?",
            "Comment m'hydrater pendant une sortie longue ?",
            "Que manger avant un col ?",
        ),
    ),
    "en": CannedAnswer(
        "I can help with cycling nutrition: protein, hydration, recovery, preparing "
        "a climb or managing your weight. What would you like to know?",
        (
            "How much protein should I eat?",
            "How should I hydrate on a long ride?",
            "What should I eat before a climb?",
        ),
    ),
}

DEFAULT_LANGUAGE = "fr"


def _contains_keyword(normalized: str, keyword: str) -> bool:
    # Short keywords must match whole words ("col" must not hit "chocolat")
    if len(keyword) <= 3:
        return keyword in re.findall(r"[a-z0-9]+", normalized)
    return keyword in normalized


def match_topic(message: str) -> Optional[ChatTopic]:
    """Return the first topic whose keywords appear in the message."""
    normalized = normalize_message(message)
    for topic in CHAT_TOPICS:
        if any(_contains_keyword(normalized, kw) for kw in topic.keywords):
            return topic
    return None


def answer_for(message: str, language: str) -> CannedAnswer:
    """Pick the canned answer for a message in the requested language."""
    lang = language if language in FALLBACK_ANSWERS else DEFAULT_LANGUAGE
    topic = match_topic(message)
    if topic is None:
        return FALLBACK_ANSWERS[lang]
    return topic.answers[lang]
