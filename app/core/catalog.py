"""
Static learning catalog: subjects, topics per subject, games and game configs.
"""
from typing import Any, Dict, List, Optional

SUBJECTS: List[str] = ["physics", "chemistry", "math", "biology"]

SUBJECT_TOPICS: Dict[str, List[str]] = {
    "physics": [
        "Mechanics", "Heat and Thermodynamics", "Waves and Sound", "Light",
        "Electricity", "Magnetism", "Modern Physics", "Nuclear Physics",
    ],
    "chemistry": [
        "Atomic Structure", "Periodic Table", "Chemical Bonding", "States of Matter",
        "Chemical Reactions", "Acids and Bases", "Metals and Non-metals", "Organic Chemistry",
    ],
    "math": [
        "Number Systems", "Algebra", "Geometry", "Trigonometry",
        "Statistics", "Probability", "Coordinate Geometry", "Mensuration",
    ],
    "biology": [
        "Cell Structure", "Human Body Systems", "Genetics", "Evolution",
        "Ecology", "Plant Biology", "Animal Biology", "Biotechnology",
    ],
}

GAMES: Dict[str, List[Dict[str, Any]]] = {
    "physics": [
        {
            "id": "projectile-motion",
            "name": "Projectile Motion Simulator",
            "description": "Learn about projectile motion by adjusting angles and velocities",
            "difficulty": 2,
            "estimatedTime": 15,
            "icon": "🎯",
        },
        {
            "id": "circuit-builder",
            "name": "Circuit Builder",
            "description": "Build and test electrical circuits",
            "difficulty": 3,
            "estimatedTime": 20,
            "icon": "⚡",
        },
        {
            "id": "wave-simulator",
            "name": "Wave Simulator",
            "description": "Explore wave properties and interference",
            "difficulty": 2,
            "estimatedTime": 12,
            "icon": "🌊",
        },
    ],
    "chemistry": [
        {
            "id": "periodic-table-explorer",
            "name": "Periodic Table Explorer",
            "description": "Interactive exploration of elements and their properties",
            "difficulty": 1,
            "estimatedTime": 10,
            "icon": "🧪",
        },
        {
            "id": "virtual-lab",
            "name": "Virtual Chemistry Lab",
            "description": "Perform safe chemical experiments virtually",
            "difficulty": 3,
            "estimatedTime": 25,
            "icon": "⚗️",
        },
        {
            "id": "molecule-builder",
            "name": "Molecule Builder",
            "description": "Build molecules and understand chemical bonding",
            "difficulty": 2,
            "estimatedTime": 15,
            "icon": "🔬",
        },
    ],
    "math": [
        {
            "id": "number-puzzles",
            "name": "Number Puzzles",
            "description": "Solve challenging number-based puzzles",
            "difficulty": 2,
            "estimatedTime": 10,
            "icon": "🔢",
        },
        {
            "id": "geometry-visualizer",
            "name": "Geometry Visualizer",
            "description": "Explore geometric shapes and transformations",
            "difficulty": 2,
            "estimatedTime": 15,
            "icon": "📐",
        },
        {
            "id": "algebra-adventure",
            "name": "Algebra Adventure",
            "description": "Solve algebraic equations in a game-like environment",
            "difficulty": 3,
            "estimatedTime": 20,
            "icon": "🎲",
        },
    ],
    "biology": [
        {
            "id": "cell-explorer",
            "name": "Cell Structure Explorer",
            "description": "Explore different types of cells and their components",
            "difficulty": 1,
            "estimatedTime": 12,
            "icon": "🧬",
        },
        {
            "id": "ecosystem-simulation",
            "name": "Ecosystem Simulation",
            "description": "Manage an ecosystem and understand food chains",
            "difficulty": 3,
            "estimatedTime": 25,
            "icon": "🌿",
        },
        {
            "id": "human-body-systems",
            "name": "Human Body Systems",
            "description": "Learn about different body systems interactively",
            "difficulty": 2,
            "estimatedTime": 18,
            "icon": "🫀",
        },
    ],
}

# Playable level definitions; games without an entry have no downloadable config yet
GAME_CONFIGS: Dict[str, Dict[str, Any]] = {
    "projectile-motion": {
        "levels": [
            {"target": {"x": 50, "y": 0}, "obstacles": [], "maxVelocity": 30},
            {"target": {"x": 75, "y": 10}, "obstacles": [{"x": 40, "y": 5, "width": 10, "height": 15}], "maxVelocity": 35},
            {
                "target": {"x": 100, "y": -10},
                "obstacles": [
                    {"x": 50, "y": 0, "width": 5, "height": 20},
                    {"x": 80, "y": -5, "width": 8, "height": 10},
                ],
                "maxVelocity": 40,
            },
        ],
        "instructions": "Adjust the angle and velocity to hit the target. Consider gravity and obstacles!",
        "physics": {"gravity": 9.81, "airResistance": 0.1},
    },
    "circuit-builder": {
        "components": ["battery", "resistor", "led", "switch", "wire"],
        "levels": [
            {"objective": "Light the LED with a simple circuit", "components": ["battery", "led", "wire"], "maxComponents": 3},
            {"objective": "Create a circuit with a switch", "components": ["battery", "led", "switch", "wire"], "maxComponents": 4},
            {"objective": "Build a circuit with resistance control", "components": ["battery", "led", "resistor", "wire"], "maxComponents": 5},
        ],
    },
    "periodic-table-explorer": {
        "gameMode": "quiz",
        "questions": [
            {"type": "element-symbol", "difficulty": 1},
            {"type": "atomic-number", "difficulty": 1},
            {"type": "element-properties", "difficulty": 2},
            {"type": "periodic-trends", "difficulty": 3},
        ],
    },
    "cell-explorer": {
        "cellTypes": ["plant", "animal", "bacteria"],
        "organelles": ["nucleus", "mitochondria", "chloroplast", "ribosome", "vacuole", "cell-wall", "cell-membrane"],
        "levels": [
            {"cellType": "animal", "organellesToFind": ["nucleus", "mitochondria", "ribosome"]},
            {"cellType": "plant", "organellesToFind": ["nucleus", "chloroplast", "vacuole", "cell-wall"]},
            {"cellType": "bacteria", "organellesToFind": ["ribosome", "cell-membrane"]},
        ],
    },
}


def is_valid_subject(subject: Optional[str]) -> bool:
    return subject in SUBJECTS


def display_name(subject: str) -> str:
    return subject[:1].upper() + subject[1:]


def find_game(subject: str, game_id: str) -> Optional[Dict[str, Any]]:
    """Look up a game in a subject's catalog."""
    for game in GAMES.get(subject, []):
        if game["id"] == game_id:
            return game
    return None
