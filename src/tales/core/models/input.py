from typing import Annotated, Optional, Tuple

from pydantic import (
    Base64Bytes,
    BaseModel,
    ConfigDict,
    Field,
    StringConstraints,
    field_validator,
)

DEFAULT_CHILD_NAME = "Friend"


class ImageInput(BaseModel):
    model_config = ConfigDict(frozen=True)

    data: bytes = Field(..., repr=False)
    mime_type: str = Field(..., description="예: image/png, image/jpeg")


class Personalization(BaseModel):
    model_config = ConfigDict(frozen=True)

    child_name: Optional[str] = None
    character_name: Optional[str] = None


class TurnInputs(BaseModel):
    """
    팔로우업 질문에서 그대로 재사용되는 (이미지, 개인화) 묶음.
    새 최상위 제출마다 교체되고 reset 시 비워집니다.
    """

    model_config = ConfigDict(frozen=True)

    image: Optional[ImageInput] = None
    personalization: Personalization = Field(default_factory=Personalization)


class StoryRequest(BaseModel):
    """A single story-generation request, frozen once built."""

    model_config = ConfigDict(frozen=True)

    image: Optional[ImageInput] = None
    question: str
    personalization: Personalization = Field(default_factory=Personalization)
    previous_topics: Tuple[str, ...] = ()

    @field_validator("question")
    @classmethod
    def question_must_not_be_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("question must not be empty")
        return value

    @classmethod
    def from_turn(
        cls, inputs: TurnInputs, question: str, previous_topics: Tuple[str, ...]
    ) -> "StoryRequest":
        return cls(
            image=inputs.image,
            question=question,
            personalization=inputs.personalization,
            previous_topics=previous_topics,
        )


# --- HTTP bodies ---

Question = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


class ImagePayload(BaseModel):
    data: Base64Bytes = Field(..., description="base64로 인코딩된 그림 파일")
    mime_type: str = Field(..., pattern=r"^image/[\w.+-]+$")


class TurnSubmission(BaseModel):
    question: Question = Field(..., description="아이의 질문")
    image: Optional[ImagePayload] = None
    child_name: Optional[str] = None
    character_name: Optional[str] = None

    def to_image(self) -> Optional[ImageInput]:
        if self.image is None:
            return None
        return ImageInput(data=self.image.data, mime_type=self.image.mime_type)

    def to_personalization(self) -> Personalization:
        return Personalization(
            child_name=self.child_name, character_name=self.character_name
        )


class FollowUpSubmission(BaseModel):
    question: Question = Field(..., description="추천 질문 중 선택된 질문")
