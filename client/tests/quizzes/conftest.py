from unittest.mock import AsyncMock, Mock

import pytest

from learnhub.quizzes.service import QuizService
from tests.quizzes.factories import make_result


@pytest.fixture
def quiz_service() -> Mock:
    """QuizService double whose submissions succeed with a pass."""
    service = Mock(spec=QuizService)
    service.submit_attempt = AsyncMock(return_value=make_result())
    return service
