from app.application.use_cases.members.member_operations import MemberService

__all__ = ["MemberService"]
