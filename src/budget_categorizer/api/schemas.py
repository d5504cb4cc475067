from pydantic import BaseModel, Field

from budget_categorizer.models import CategorizationResult, TransactionInput


class CategorizeRequest(BaseModel):
    user_id: str = Field(min_length=1)
    transaction: TransactionInput


class BatchCategorizeRequest(BaseModel):
    user_id: str = Field(min_length=1)
    transactions: list[TransactionInput]


class BatchCategorizeResponse(BaseModel):
    results: list[CategorizationResult]


class LearnRequest(BaseModel):
    user_id: str = Field(min_length=1)
    transaction: TransactionInput
    category: str = Field(min_length=1)
