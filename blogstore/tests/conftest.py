import pytest
import pytest_asyncio
from typing import AsyncGenerator
from sqlalchemy.ext.asyncio import AsyncSession

from blogstore.config import Settings
from blogstore.db.session import Database
from blogstore.schemas.user_schema import UserCreate
from blogstore.schemas.post_schema import PostCreate
from blogstore.schemas.comment_schema import CommentCreate
from blogstore.services.user_service import UserService, build_password_context
from blogstore.services.post_service import PostService
from blogstore.services.comment_service import CommentService

# Test database URL - in-memory SQLite
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        TESTING=True,
        TEST_DATABASE_URL=TEST_DATABASE_URL,
        BCRYPT_ROUNDS=4,
        _env_file=None,
    )

@pytest.fixture
def pwd_context(test_settings: Settings):
    """Cheapest bcrypt cost; hashing is not what these tests exercise"""
    return build_password_context(test_settings.BCRYPT_ROUNDS)

@pytest_asyncio.fixture
async def database(test_settings: Settings) -> AsyncGenerator[Database, None]:
    """Fresh in-memory database with the schema applied"""
    db = Database(test_settings)
    await db.init_db()
    yield db
    await db.close()

@pytest_asyncio.fixture
async def test_db(database: Database) -> AsyncGenerator[AsyncSession, None]:
    """Create test database session"""
    async with database.session() as session:
        yield session

@pytest.fixture
def user_service(test_db: AsyncSession, pwd_context) -> UserService:
    return UserService(test_db, pwd_context)

@pytest.fixture
def post_service(test_db: AsyncSession) -> PostService:
    return PostService(test_db)

@pytest.fixture
def comment_service(test_db: AsyncSession) -> CommentService:
    return CommentService(test_db)

@pytest_asyncio.fixture
async def test_user(user_service: UserService):
    """Create a test user"""
    return await user_service.create_user(UserCreate(
        username="testuser",
        email="test@example.com",
        password="TestPassword123!"
    ))

@pytest_asyncio.fixture
async def test_post(post_service: PostService, test_user):
    """Create a test post owned by test_user"""
    return await post_service.create_post(
        test_user.id,
        PostCreate(title="Test post", content="This is a test post")
    )

@pytest.fixture
def add_comments(comment_service: CommentService):
    """Factory adding ``count`` comments by ``user_id`` to ``post_id``"""
    async def _add(post_id: int, user_id: int, count: int):
        comments = []
        for i in range(count):
            comments.append(await comment_service.create_comment(
                post_id,
                CommentCreate(content=f"Comment {i}", user_id=user_id)
            ))
        return comments
    return _add
