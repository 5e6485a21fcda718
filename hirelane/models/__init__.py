from hirelane.models.question_bank import Question, QuestionBank
from hirelane.models.sso_configuration import SSOConfiguration

__all__ = ["Question", "QuestionBank", "SSOConfiguration"]
