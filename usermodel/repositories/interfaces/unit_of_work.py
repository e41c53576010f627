from abc import ABC, abstractmethod
from typing import ContextManager

class IUnitOfWork(ABC):
    @abstractmethod
    def transaction(self) -> ContextManager[None]:
        """
        하나의 원자적 트랜잭션 경계를 여는 컨텍스트 매니저를 반환합니다.

        블록이 정상 종료되면 commit, 예외가 발생하면 rollback 후 예외를 그대로 다시 발생시킵니다.
        이미 열린 트랜잭션 안에서 다시 호출하면 바깥 트랜잭션에 합류합니다.
        """
        pass
