from .user import User
from .client_profile import ClientProfile
from .fitness_package import FitnessPackage
from .package_purchase import PackagePurchase
from .trainer_client import TrainerClient
from .trainer_order import TrainerOrder
from .workout_program import WorkoutProgram
from .nutrition_program import NutritionProgram
from .supplement_program import SupplementProgram
from .support_question import SupportQuestion
from .pt_form import PTForm

__all__ = [
    "User", "ClientProfile",
    "FitnessPackage", "PackagePurchase",
    "TrainerClient", "TrainerOrder",
    "WorkoutProgram", "NutritionProgram", "SupplementProgram",
    "SupportQuestion", "PTForm",
]
