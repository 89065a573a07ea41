from typing import List

from pydantic import BaseModel, ConfigDict, Field


class StoryMeta(BaseModel):
    model_config = ConfigDict(frozen=True)

    detected_language: str
    educational_concept: str = Field(..., description="이번 턴의 핵심 개념, 다음 턴의 문맥으로 쓰임")
    context_used: bool
    character_voice_profile: str


class Storyboard(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str
    display_text: str = Field(..., description="[SFX]/(Emotion) 태그가 포함된 화면용 텍스트")
    audio_text: str = Field(..., description="음성 합성에 그대로 넘기는 텍스트")
    interactive_question: str
    suggested_questions: List[str]


class Visuals(BaseModel):
    model_config = ConfigDict(frozen=True)

    image_prompt: str


class StoryResult(BaseModel):
    """
    텍스트 생성 호출 한 번의 결과.
    업스트림 JSON의 snake_case 필드명을 그대로 사용합니다.
    """

    model_config = ConfigDict(frozen=True)

    meta: StoryMeta
    storyboard: Storyboard
    visuals: Visuals
