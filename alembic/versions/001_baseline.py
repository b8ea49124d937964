"""Baseline: peer-learning schema.

Creates users, courses, enrollments, reviews, certificates, badges,
user_badges, mentor_requests, sessions, learning communities (members,
resources, sessions) and user_projects. Columns carry no defaults; the
application's entity factories supply them.

Revision ID: 001_baseline
Revises: None
Create Date: 2026-10-18
"""

from collections.abc import Sequence

from alembic import op

revision: str = "001_baseline"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    # --- Users ---
    op.execute("""
        CREATE TABLE IF NOT EXISTS users (
            id VARCHAR(36) PRIMARY KEY,
            email VARCHAR(320) UNIQUE NOT NULL,
            full_name VARCHAR(128) NOT NULL,
            department VARCHAR(128) NOT NULL,
            year_of_study INTEGER NOT NULL,
            role VARCHAR(16) NOT NULL,
            profile_picture TEXT,
            bio TEXT,
            linkedin_url TEXT,
            github_url TEXT,
            portfolio_url TEXT,
            experience_description TEXT,
            xp_points INTEGER NOT NULL,
            level_number INTEGER NOT NULL,
            is_verified BOOLEAN NOT NULL,
            total_earnings NUMERIC(10, 2) NOT NULL,
            created_at TIMESTAMPTZ NOT NULL,
            updated_at TIMESTAMPTZ NOT NULL,
            CONSTRAINT users_role_check CHECK (role IN ('student', 'mentor', 'admin')),
            CONSTRAINT users_xp_points_check CHECK (xp_points >= 0),
            CONSTRAINT users_level_number_check CHECK (level_number >= 1),
            CONSTRAINT users_total_earnings_check CHECK (total_earnings >= 0)
        )
    """)

    # --- Courses ---
    op.execute("""
        CREATE TABLE IF NOT EXISTS courses (
            id VARCHAR(36) PRIMARY KEY,
            mentor_id VARCHAR(36) NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            title VARCHAR(200) NOT NULL,
            description TEXT NOT NULL,
            domain VARCHAR(64) NOT NULL,
            price NUMERIC(10, 2) NOT NULL,
            duration_hours INTEGER NOT NULL,
            max_students INTEGER,
            session_link TEXT,
            course_image TEXT,
            is_active BOOLEAN NOT NULL,
            created_at TIMESTAMPTZ NOT NULL,
            updated_at TIMESTAMPTZ NOT NULL,
            CONSTRAINT courses_price_check CHECK (price >= 0)
        )
    """)
    op.execute("CREATE INDEX IF NOT EXISTS ix_courses_mentor_id ON courses(mentor_id)")

    # --- Enrollments ---
    op.execute("""
        CREATE TABLE IF NOT EXISTS enrollments (
            id VARCHAR(36) PRIMARY KEY,
            student_id VARCHAR(36) NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            course_id VARCHAR(36) NOT NULL REFERENCES courses(id) ON DELETE CASCADE,
            enrolled_at TIMESTAMPTZ NOT NULL,
            completed_at TIMESTAMPTZ,
            is_completed BOOLEAN NOT NULL,
            CONSTRAINT enrollments_student_id_course_id_key UNIQUE (student_id, course_id)
        )
    """)
    op.execute("CREATE INDEX IF NOT EXISTS ix_enrollments_student_id ON enrollments(student_id)")
    op.execute("CREATE INDEX IF NOT EXISTS ix_enrollments_course_id ON enrollments(course_id)")

    # --- Reviews ---
    op.execute("""
        CREATE TABLE IF NOT EXISTS reviews (
            id VARCHAR(36) PRIMARY KEY,
            student_id VARCHAR(36) NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            course_id VARCHAR(36) NOT NULL REFERENCES courses(id) ON DELETE CASCADE,
            mentor_id VARCHAR(36) NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            rating INTEGER NOT NULL,
            review_text TEXT,
            is_helpful BOOLEAN NOT NULL,
            created_at TIMESTAMPTZ NOT NULL,
            CONSTRAINT reviews_rating_check CHECK (rating >= 1 AND rating <= 5)
        )
    """)
    op.execute("CREATE INDEX IF NOT EXISTS ix_reviews_course_id ON reviews(course_id)")
    op.execute("CREATE INDEX IF NOT EXISTS ix_reviews_mentor_id ON reviews(mentor_id)")

    # --- Certificates ---
    op.execute("""
        CREATE TABLE IF NOT EXISTS certificates (
            id VARCHAR(36) PRIMARY KEY,
            student_id VARCHAR(36) NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            course_id VARCHAR(36) NOT NULL REFERENCES courses(id) ON DELETE CASCADE,
            mentor_id VARCHAR(36) NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            certificate_id VARCHAR(64) UNIQUE NOT NULL,
            issued_at TIMESTAMPTZ NOT NULL
        )
    """)
    op.execute("CREATE INDEX IF NOT EXISTS ix_certificates_student_id ON certificates(student_id)")
    op.execute("CREATE INDEX IF NOT EXISTS ix_certificates_mentor_id ON certificates(mentor_id)")

    # --- Badges ---
    op.execute("""
        CREATE TABLE IF NOT EXISTS badges (
            id VARCHAR(36) PRIMARY KEY,
            name VARCHAR(128) UNIQUE NOT NULL,
            description TEXT NOT NULL,
            icon VARCHAR(16) NOT NULL,
            badge_type VARCHAR(16) NOT NULL,
            criteria TEXT NOT NULL,
            created_at TIMESTAMPTZ NOT NULL,
            CONSTRAINT badges_badge_type_check CHECK (badge_type IN ('learner', 'mentor'))
        )
    """)
    op.execute("""
        CREATE TABLE IF NOT EXISTS user_badges (
            id VARCHAR(36) PRIMARY KEY,
            user_id VARCHAR(36) NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            badge_id VARCHAR(36) NOT NULL REFERENCES badges(id) ON DELETE CASCADE,
            earned_at TIMESTAMPTZ NOT NULL,
            CONSTRAINT user_badges_user_id_badge_id_key UNIQUE (user_id, badge_id)
        )
    """)
    op.execute("CREATE INDEX IF NOT EXISTS ix_user_badges_user_id ON user_badges(user_id)")

    # --- Mentor requests and sessions ---
    op.execute("""
        CREATE TABLE IF NOT EXISTS mentor_requests (
            id VARCHAR(36) PRIMARY KEY,
            student_id VARCHAR(36) NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            request_message TEXT,
            status VARCHAR(16) NOT NULL,
            reviewed_by VARCHAR(36) REFERENCES users(id),
            reviewed_at TIMESTAMPTZ,
            created_at TIMESTAMPTZ NOT NULL,
            CONSTRAINT mentor_requests_status_check CHECK (status IN ('pending', 'approved', 'rejected'))
        )
    """)
    op.execute("CREATE INDEX IF NOT EXISTS ix_mentor_requests_student_id ON mentor_requests(student_id)")
    op.execute("""
        CREATE TABLE IF NOT EXISTS sessions (
            id VARCHAR(36) PRIMARY KEY,
            course_id VARCHAR(36) NOT NULL REFERENCES courses(id) ON DELETE CASCADE,
            mentor_id VARCHAR(36) NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            session_date TIMESTAMPTZ NOT NULL,
            duration_minutes INTEGER NOT NULL,
            session_link TEXT,
            is_completed BOOLEAN NOT NULL,
            completed_at TIMESTAMPTZ,
            created_at TIMESTAMPTZ NOT NULL
        )
    """)
    op.execute("CREATE INDEX IF NOT EXISTS ix_sessions_course_id ON sessions(course_id)")

    # --- Learning communities ---
    op.execute("""
        CREATE TABLE IF NOT EXISTS learning_communities (
            id VARCHAR(36) PRIMARY KEY,
            name VARCHAR(128) NOT NULL,
            description TEXT,
            category VARCHAR(64) NOT NULL,
            created_by VARCHAR(36) NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            course_id VARCHAR(36) REFERENCES courses(id) ON DELETE CASCADE,
            is_active BOOLEAN NOT NULL,
            created_at TIMESTAMPTZ NOT NULL,
            updated_at TIMESTAMPTZ NOT NULL
        )
    """)
    op.execute("""
        CREATE TABLE IF NOT EXISTS community_members (
            id VARCHAR(36) PRIMARY KEY,
            community_id VARCHAR(36) NOT NULL REFERENCES learning_communities(id) ON DELETE CASCADE,
            user_id VARCHAR(36) NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            role VARCHAR(16) NOT NULL,
            joined_at TIMESTAMPTZ NOT NULL,
            CONSTRAINT community_members_community_id_user_id_key UNIQUE (community_id, user_id),
            CONSTRAINT community_members_role_check CHECK (role IN ('admin', 'senior', 'member'))
        )
    """)
    op.execute("CREATE INDEX IF NOT EXISTS ix_community_members_community_id ON community_members(community_id)")
    op.execute("CREATE INDEX IF NOT EXISTS ix_community_members_user_id ON community_members(user_id)")
    op.execute("""
        CREATE TABLE IF NOT EXISTS community_resources (
            id VARCHAR(36) PRIMARY KEY,
            community_id VARCHAR(36) NOT NULL REFERENCES learning_communities(id) ON DELETE CASCADE,
            uploaded_by VARCHAR(36) NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            title VARCHAR(200) NOT NULL,
            description TEXT,
            resource_type VARCHAR(16) NOT NULL,
            resource_url TEXT NOT NULL,
            is_featured BOOLEAN NOT NULL,
            created_at TIMESTAMPTZ NOT NULL,
            CONSTRAINT community_resources_resource_type_check
                CHECK (resource_type IN ('video', 'document', 'link', 'meet_link'))
        )
    """)
    op.execute("CREATE INDEX IF NOT EXISTS ix_community_resources_community_id ON community_resources(community_id)")
    op.execute("""
        CREATE TABLE IF NOT EXISTS community_sessions (
            id VARCHAR(36) PRIMARY KEY,
            community_id VARCHAR(36) NOT NULL REFERENCES learning_communities(id) ON DELETE CASCADE,
            host_id VARCHAR(36) NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            title VARCHAR(200) NOT NULL,
            description TEXT,
            session_date TIMESTAMPTZ NOT NULL,
            duration_minutes INTEGER NOT NULL,
            meet_link TEXT,
            is_completed BOOLEAN NOT NULL,
            created_at TIMESTAMPTZ NOT NULL
        )
    """)
    op.execute("CREATE INDEX IF NOT EXISTS ix_community_sessions_community_id ON community_sessions(community_id)")

    # --- Portfolio projects ---
    op.execute("""
        CREATE TABLE IF NOT EXISTS user_projects (
            id VARCHAR(36) PRIMARY KEY,
            user_id VARCHAR(36) NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            title VARCHAR(200) NOT NULL,
            description TEXT,
            project_url TEXT,
            github_url TEXT,
            technologies JSONB NOT NULL,
            is_featured BOOLEAN NOT NULL,
            created_at TIMESTAMPTZ NOT NULL
        )
    """)
    op.execute("CREATE INDEX IF NOT EXISTS ix_user_projects_user_id ON user_projects(user_id)")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS user_projects CASCADE")
    op.execute("DROP TABLE IF EXISTS community_sessions CASCADE")
    op.execute("DROP TABLE IF EXISTS community_resources CASCADE")
    op.execute("DROP TABLE IF EXISTS community_members CASCADE")
    op.execute("DROP TABLE IF EXISTS learning_communities CASCADE")
    op.execute("DROP TABLE IF EXISTS sessions CASCADE")
    op.execute("DROP TABLE IF EXISTS mentor_requests CASCADE")
    op.execute("DROP TABLE IF EXISTS user_badges CASCADE")
    op.execute("DROP TABLE IF EXISTS badges CASCADE")
    op.execute("DROP TABLE IF EXISTS certificates CASCADE")
    op.execute("DROP TABLE IF EXISTS reviews CASCADE")
    op.execute("DROP TABLE IF EXISTS enrollments CASCADE")
    op.execute("DROP TABLE IF EXISTS courses CASCADE")
    op.execute("DROP TABLE IF EXISTS users CASCADE")
