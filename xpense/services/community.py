import logging
from dataclasses import dataclass
from typing import Optional

from sqlalchemy.orm import Session

from xpense.core.errors import InvalidRequest, NotFound
from xpense.models.community import CommunityPost, Expense, PostComment
from xpense.models.user import User
from xpense.schemas.transaction_schema import CommunityPostRef
from xpense.services.rewards import RewardIssuer

logger = logging.getLogger(__name__)

FEED_SIZE = 50


@dataclass
class PostCreated:
    post: CommunityPost
    token_reward: float = 0


class CommunityService:
    def __init__(self, issuer: RewardIssuer, post_reward: int = 5):
        self.issuer = issuer
        self.post_reward = post_reward

    def create_post(self, db: Session, user: User, content: str, expense_id: Optional[int] = None) -> PostCreated:
        content = (content or "").strip()
        if not content:
            raise InvalidRequest("Content is required")

        post = CommunityPost(user_id=user.id, user_name=user.name, content=content)
        if expense_id is not None:
            expense = db.query(Expense).filter_by(id=expense_id, user_id=user.id).first()
            if not expense:
                raise NotFound("Expense not found or unauthorized")
            post.expense_id = expense.id
            post.amount = expense.amount
            post.category = expense.category

        db.add(post)
        db.commit()
        db.refresh(post)

        # Sharing reward is best effort; the post stands either way.
        reward = 0
        if user.wallet_ready:
            outcome = self.issuer.issue(
                db, user, self.post_reward, "Community post", activity=CommunityPostRef(post_id=post.id)
            )
            if outcome.ok:
                reward = outcome.transaction.amount
            else:
                logger.warning("Post reward for user %s skipped (%s)", user.id, outcome.error.code)

        return PostCreated(post=post, token_reward=reward)

    def list_posts(self, db: Session, limit: int = FEED_SIZE) -> list[CommunityPost]:
        return (
            db.query(CommunityPost)
            .order_by(CommunityPost.created_at.desc(), CommunityPost.id.desc())
            .limit(limit)
            .all()
        )

    def _get(self, db: Session, post_id: int) -> CommunityPost:
        post = db.get(CommunityPost, post_id)
        if not post:
            raise NotFound("Post not found")
        return post

    def like_post(self, db: Session, post_id: int) -> CommunityPost:
        post = self._get(db, post_id)
        db.query(CommunityPost).filter_by(id=post.id).update(
            {CommunityPost.likes: CommunityPost.likes + 1}, synchronize_session=False
        )
        db.commit()
        db.refresh(post)
        return post

    def add_comment(self, db: Session, user: User, post_id: int, content: str) -> CommunityPost:
        post = self._get(db, post_id)
        content = (content or "").strip()
        if not content:
            raise InvalidRequest("Content is required")
        db.add(PostComment(post_id=post.id, user_id=user.id, user_name=user.name, content=content))
        db.commit()
        db.refresh(post)
        return post
