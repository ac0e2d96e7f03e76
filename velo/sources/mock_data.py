"""
Canned payloads served by the mock data source.

Builders take the random generator and the reference day explicitly so the
same seed and day always produce the same data.
"""
import random
from datetime import date, datetime, time, timedelta
from typing import Dict, List, Any, Optional


# =============================================================================
# Nutrition
# =============================================================================

def build_nutrition_log_entries(day: str) -> List[Dict[str, Any]]:
    return [
        {
            "id": "1",
            "date": day,
            "mealType": "petit-déjeuner",
            "foodName": "Porridge aux fruits rouges",
            "portion": 1,
            "calories": 350,
            "protein": 12,
            "carbs": 45,
            "fat": 10,
            "notes": "Ajout de miel et de myrtilles",
        },
        {
            "id": "2",
            "date": day,
            "mealType": "déjeuner",
            "foodName": "Pâtes complètes aux légumes",
            "portion": 1,
            "calories": 450,
            "protein": 18,
            "carbs": 65,
            "fat": 12,
            "notes": "Avec sauce tomate maison",
        },
        {
            "id": "3",
            "date": day,
            "mealType": "collation",
            "foodName": "Barre énergétique",
            "portion": 1,
            "calories": 180,
            "protein": 8,
            "carbs": 25,
            "fat": 5,
            "notes": "Avant l'entraînement",
        },
    ]


DAILY_CALORIE_TARGET = 2400

TREND_RECOMMENDATIONS = {
    "calories": (
        "Maintien d'un apport calorique régulier entre 2200 et 2500 kcal "
        "selon l'intensité de vos entraînements."
    ),
    "macros": (
        "Augmentez légèrement votre apport en protéines pour favoriser la "
        "récupération musculaire, surtout après des séances intenses."
    ),
}


def build_nutrition_trends(
    start_date: str,
    end_date: str,
    rng: random.Random,
) -> Dict[str, Any]:
    """
    One aggregate per calendar day in [start_date, end_date].

    Raises:
        ValueError: If either bound is not an ISO date
    """
    start = date.fromisoformat(start_date)
    end = date.fromisoformat(end_date)

    daily_data: Dict[str, Dict[str, int]] = {}
    day = start
    while day <= end:
        daily_data[day.isoformat()] = {
            "calories": 2200 + rng.randrange(500),
            "calorieTarget": DAILY_CALORIE_TARGET,
            "protein": 80 + rng.randrange(40),
            "carbs": 250 + rng.randrange(80),
            "fat": 65 + rng.randrange(25),
        }
        day += timedelta(days=1)

    return {
        "startDate": start_date,
        "endDate": end_date,
        "dailyData": daily_data,
        "recommendations": dict(TREND_RECOMMENDATIONS),
    }


def build_nutrition_plan(plan_id: str = "plan-123") -> Dict[str, Any]:
    return {
        "id": plan_id,
        "name": "Plan Performance Cycliste",
        "description": "Plan nutritionnel optimisé pour les performances en cyclisme de montagne",
        "dailyCalories": 2400,
        "macroRatio": {"protein": 25, "carbs": 55, "fat": 20},
        "meals": [
            {
                "name": "Petit-déjeuner",
                "time": "07:00",
                "description": "Riche en glucides complexes pour l'énergie",
                "foods": [
                    {"name": "Porridge d'avoine", "portion": 1, "calories": 300,
                     "protein": 10, "carbs": 50, "fat": 5},
                    {"name": "Banane", "portion": 1, "calories": 105,
                     "protein": 1, "carbs": 27, "fat": 0},
                ],
            },
            {
                "name": "Déjeuner",
                "time": "12:30",
                "description": "Équilibré en protéines et glucides",
                "foods": [
                    {"name": "Pâtes complètes", "portion": 1, "calories": 350,
                     "protein": 12, "carbs": 70, "fat": 2},
                    {"name": "Blanc de poulet", "portion": 1, "calories": 165,
                     "protein": 31, "carbs": 0, "fat": 3.6},
                ],
            },
        ],
        "goal": "performance",
        "cyclingProfile": "climber",
        "isActive": True,
        "createdAt": "2023-03-15T10:00:00Z",
        "updatedAt": "2023-04-01T14:30:00Z",
    }


FOOD_RECOMMENDATIONS = {
    "pre": [
        {
            "id": "pre-workout-oatmeal",
            "name": "Porridge énergétique",
            "category": "Petit-déjeuner",
            "timing": "pre",
            "description": "Porridge enrichi en glucides complexes, idéal avant un entraînement matinal",
            "benefits": ["Énergie progressive", "Satiété", "Digestion facile"],
            "macros": {"calories": 350, "protein": 12, "carbs": 60, "fat": 8},
            "example": "Flocons d'avoine, banane, miel et cannelle",
        },
        {
            "id": "pre-workout-toast",
            "name": "Toast complet & beurre d'amande",
            "category": "En-cas",
            "timing": "pre",
            "description": "Combinaison de glucides et lipides sains pour un entraînement modéré",
            "benefits": ["Énergie durable", "Antioxydants", "Oméga-3"],
            "macros": {"calories": 280, "protein": 8, "carbs": 35, "fat": 12},
            "example": "Pain complet, beurre d'amande et miel",
        },
    ],
    "during": [
        {
            "id": "during-workout-gel",
            "name": "Gel énergétique maison",
            "category": "Nutrition sportive",
            "timing": "during",
            "description": "Glucides rapidement assimilables pour maintenir l'énergie pendant l'effort",
            "benefits": ["Énergie rapide", "Anti-crampes", "Hydratation"],
            "macros": {"calories": 100, "protein": 0, "carbs": 25, "fat": 0},
            "example": "Miel, eau, sel, jus de citron et sirop d'agave",
        },
        {
            "id": "during-workout-banana",
            "name": "Banane et fruits secs",
            "category": "En-cas",
            "timing": "during",
            "description": "Collation naturelle facile à transporter pour les sorties longues",
            "benefits": ["Potassium", "Énergie progressive", "Digestion facile"],
            "macros": {"calories": 180, "protein": 2, "carbs": 40, "fat": 1},
            "example": "Banane mûre et abricots secs",
        },
    ],
    "post": [
        {
            "id": "post-workout-smoothie",
            "name": "Smoothie récupération",
            "category": "Boisson",
            "timing": "post",
            "description": "Protéines et glucides pour optimiser la récupération musculaire",
            "benefits": ["Réparation musculaire", "Réhydratation", "Glycogène"],
            "macros": {"calories": 320, "protein": 20, "carbs": 40, "fat": 7},
            "example": "Lait, banane, myrtilles, protéine en poudre et flocons d'avoine",
        },
        {
            "id": "post-workout-rice-chicken",
            "name": "Bol riz & poulet",
            "category": "Repas",
            "timing": "post",
            "description": "Repas complet après un entraînement intensif",
            "benefits": ["Protéines complètes", "Glycogène", "Anti-inflammatoire"],
            "macros": {"calories": 450, "protein": 30, "carbs": 55, "fat": 8},
            "example": "Riz, blanc de poulet, légumes et sauce au yaourt",
        },
    ],
}

GOAL_SPECIFIC_ADVICE = [
    "Augmentez votre apport calorique de 300-500 kcal les jours d'entraînement intensif ou long.",
    "Consommez des protéines dans les 30 minutes suivant un entraînement difficile.",
    "Pour les ascensions prévues, privilégiez des glucides à index glycémique bas la veille "
    "et des glucides rapides pendant l'effort.",
]

PREDICTED_WEEKLY_BURN = 8500

# Day offsets from today -> kcal
PREDICTED_BURN = {1: 1200, 2: 850, 3: 400, 4: 1100, 5: 600, 6: 1500, 7: 300}
ACTUAL_CONSUMED = {-7: 2300, -6: 2450, -5: 2200, -4: 2600, -3: 2150, -2: 2400, -1: 2350, 0: 2500}
RECOMMENDED_CALORIES = {1: 2750, 2: 2600, 3: 2400, 4: 2700, 5: 2500, 6: 2800, 7: 2300}


def _by_day(today: date, values: Dict[int, int]) -> Dict[str, int]:
    return {(today + timedelta(days=offset)).isoformat(): kcal for offset, kcal in values.items()}


def build_training_recommendations(today: date, plan_id: Optional[str] = None) -> Dict[str, Any]:
    bundle = {
        "dailyRecommendations": {"calories": 2600, "protein": 130, "carbs": 350, "fat": 75},
        "predictedWeeklyBurn": PREDICTED_WEEKLY_BURN,
        "predictedCalorieBurn": _by_day(today, PREDICTED_BURN),
        "actualCaloriesConsumed": _by_day(today, ACTUAL_CONSUMED),
        "recommendedCalories": _by_day(today, RECOMMENDED_CALORIES),
        "foodRecommendations": {
            timing: [dict(item) for item in items]
            for timing, items in FOOD_RECOMMENDATIONS.items()
        },
        "goalSpecificAdvice": list(GOAL_SPECIFIC_ADVICE),
    }
    if plan_id is not None:
        bundle["planId"] = plan_id
    return bundle


# =============================================================================
# Training & Strava
# =============================================================================

def _day_start(day: date) -> str:
    return datetime.combine(day, time()).isoformat()


def build_upcoming_training_sessions(today: date) -> List[Dict[str, Any]]:
    return [
        {
            "id": "session-1",
            "title": "Sortie longue endurance",
            "date": _day_start(today),
            "type": "Endurance",
            "duration": 180,
            "description": "Sortie longue à intensité modérée pour développer l'endurance de base",
            "intensityScore": 60,
            "estimatedCaloriesBurn": 1200,
            "targets": {"power": 180, "heartRate": 145, "cadence": 90},
        },
        {
            "id": "session-2",
            "title": "Intervals HIIT",
            "date": _day_start(today + timedelta(days=2)),
            "type": "HIIT",
            "duration": 75,
            "description": "Séance d'intervalles à haute intensité pour développer la puissance",
            "intensityScore": 85,
            "estimatedCaloriesBurn": 850,
            "targets": {"power": 250, "heartRate": 165, "cadence": 95},
            "intervals": {"work": 30, "rest": 60, "sets": 8},
        },
        {
            "id": "session-3",
            "title": "Simulation ascension du Col du Tourmalet",
            "date": _day_start(today + timedelta(days=4)),
            "type": "Ascension",
            "duration": 120,
            "description": "Séance spécifique pour préparer l'ascension du Col du Tourmalet",
            "intensityScore": 75,
            "estimatedCaloriesBurn": 1100,
            "targets": {"power": 220, "heartRate": 155, "cadence": 80},
        },
    ]


STRAVA_AUTH_URL = (
    "https://www.strava.com/oauth/authorize?client_id=12345&response_type=code"
    "&redirect_uri=https://velo-altitude.fr/api/strava/callback"
    "&approval_prompt=auto&scope=activity:read,profile:read_all"
)

ACTIVITY_WINDOW_DAYS = 14


def build_strava_activities(today: date, rng: random.Random) -> Dict[str, Any]:
    """Rides over the last two weeks, every third day off, with weekly averages."""
    activities = []
    total_calories = total_distance = total_elevation = total_time = 0

    for days_ago in range(ACTIVITY_WINDOW_DAYS, 0, -1):
        if days_ago % 3 == 0:
            continue  # rest day

        intensity = rng.random()
        distance = round(20 + rng.random() * 60)
        elevation = round(200 + rng.random() * 1000)
        duration = round(60 + distance * 3)
        calories_burned = round(300 + distance * 15)

        if intensity > 0.7:
            name = "Sortie intensive"
        elif intensity > 0.4:
            name = "Sortie endurance"
        else:
            name = "Sortie récupération"

        activities.append({
            "id": f"activity-{days_ago}",
            "date": (today - timedelta(days=days_ago)).isoformat(),
            "name": name,
            "type": "Ride",
            "distance": distance,
            "elevation": elevation,
            "duration": duration,
            "caloriesBurned": calories_burned,
            "averagePower": round(150 + rng.random() * 100),
            "averageHeartRate": round(130 + rng.random() * 40),
        })

        total_calories += calories_burned
        total_distance += distance
        total_elevation += elevation
        total_time += duration

    weeks = ACTIVITY_WINDOW_DAYS // 7
    return {
        "activities": activities,
        "summary": {
            "weeklyCaloriesBurned": round(total_calories / weeks),
            "weeklyDistance": round(total_distance / weeks),
            "weeklyElevation": round(total_elevation / weeks),
            "weeklyTime": round(total_time / weeks),
        },
    }
