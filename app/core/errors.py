# app/core/errors.py


class ChatPipelineError(Exception):
    """
    질문 한 건 처리(계획 → 실행 → 답변) 중 발생하는 도메인 오류의 베이스.
    이 오류가 나면 부분 결과 없이 질문 전체가 실패한다.
    """


class ContentMissingError(ChatPipelineError):
    """LLM이 빈 응답을 반환한 경우"""


class PlanParseError(ChatPipelineError):
    """LLM 응답이 유효한 JSON이 아닌 경우 (raw 텍스트를 같이 보관)"""

    def __init__(self, message: str, raw: str):
        super().__init__(message)
        self.raw = raw


class SchemaViolationError(ChatPipelineError):
    """JSON은 맞지만 'queries' 배열이 없는 경우"""
