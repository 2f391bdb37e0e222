"""用户 CRUD：集中管理用户相关的数据操作。"""

from typing import Optional, Tuple

from sqlalchemy.orm import Session

from app.packages.rbac.core.enums import UserStatusEnum
from app.packages.rbac.crud.base import CRUDBase
from app.packages.rbac.models.user import User


class CRUDUser(CRUDBase[User]):
    """封装常用的用户查询方法，供业务层复用。"""

    def get_by_login_name(
        self,
        db: Session,
        login_name: str,
        *,
        platform_id: str,
        active_only: bool = False,
    ) -> Optional[User]:
        """根据平台内唯一的登录名获取用户。"""
        query = self.query(db, platform_id=platform_id).filter(User.login_name == login_name)
        if active_only:
            query = query.filter(User.status == UserStatusEnum.ACTIVE.value)
        return query.first()

    def list_with_filters(
        self,
        db: Session,
        *,
        platform_id: str,
        name: Optional[str] = None,
        login_name: Optional[str] = None,
        status: Optional[str] = None,
        skip: int = 0,
        limit: int = 10,
    ) -> Tuple[list[User], int]:
        """按照昵称/登录名模糊匹配与状态过滤用户，按创建时间倒序分页。"""
        query = self.query(db, platform_id=platform_id)

        if name:
            query = query.filter(self.model.nickname.ilike(f"%{name.strip()}%"))
        if login_name:
            query = query.filter(self.model.login_name.ilike(f"%{login_name.strip()}%"))
        if status:
            query = query.filter(self.model.status == status.strip().lower())

        total = query.count()
        items = (
            query.order_by(self.model.create_time.desc(), self.model.uuid.asc())
            .offset(max(skip, 0))
            .limit(max(limit, 1))
            .all()
        )
        return items, total


user_crud = CRUDUser(User)
