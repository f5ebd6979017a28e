"""initial schema: accounts, plans, subscriptions, courses, events, career, content

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '0001_initial_schema'
down_revision = None
branch_labels = None
depends_on = None

ROLE = sa.Enum('USER', 'ADMIN', 'MENTOR', 'TEAM_MEMBER', name='role', native_enum=False, length=32)
GENDER = sa.Enum('MALE', 'FEMALE', 'OTHER', name='gender', native_enum=False, length=16)
PROGRESS = sa.Enum('PAYMENT_PENDING', 'PERSONAL_DISCOVERY_PENDING', 'CV_ALIGNMENT_PENDING',
                   'SCHOLARSHIP_MATRIX_PENDING', 'ESSAYS_PENDING', 'COMPLETED',
                   name='progress_status', native_enum=False, length=40)
SUB_STATUS = sa.Enum('ACTIVE', 'EXPIRED', 'CANCELLED', 'PENDING',
                     name='subscription_status', native_enum=False, length=16)
PAY_STATUS = sa.Enum('PENDING', 'APPROVED', 'REJECTED', name='payment_status', native_enum=False, length=16)
ASSESS_STATUS = sa.Enum('IN_PROGRESS', 'COMPLETED', 'ABANDONED',
                        name='assessment_status', native_enum=False, length=16)


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    ]


def upgrade():
    # ---------- accounts ----------
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('first_name', sa.String(length=80), nullable=False),
        sa.Column('last_name', sa.String(length=80), nullable=False),
        sa.Column('email', sa.String(length=120), nullable=False),
        sa.Column('phone', sa.String(length=32), nullable=True),
        sa.Column('service', sa.String(length=120), nullable=True),
        sa.Column('gender', GENDER, nullable=True),
        sa.Column('country', sa.String(length=80), nullable=True),
        sa.Column('education_level', sa.String(length=80), nullable=True),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('role', ROLE, nullable=False),
        sa.Column('progress_status', PROGRESS, nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    op.create_table(
        'user_profiles',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('bio', sa.Text(), nullable=True),
        sa.Column('avatar', sa.String(length=512), nullable=True),
        sa.Column('phone_number', sa.String(length=32), nullable=True),
        sa.Column('address', sa.String(length=255), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='RESTRICT'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id'),
    )

    op.create_table(
        'notifications',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('title', sa.String(length=200), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('read', sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='RESTRICT'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_notifications_user_id', 'notifications', ['user_id'])
    op.create_index('ix_notifications_created_at', 'notifications', ['created_at'])

    # ---------- plans & subscriptions ----------
    op.create_table(
        'plans',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=120), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('price', sa.Float(), nullable=False),
        sa.Column('duration', sa.Integer(), nullable=False),
        sa.Column('services', sa.JSON(), nullable=False),
        sa.Column('features', sa.JSON(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_plans_created_at', 'plans', ['created_at'])

    op.create_table(
        'subscriptions',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('plan_id', sa.Integer(), nullable=False),
        sa.Column('status', SUB_STATUS, nullable=False),
        sa.Column('start_date', sa.DateTime(), nullable=False),
        sa.Column('end_date', sa.DateTime(), nullable=False),
        *_timestamps(),
        sa.CheckConstraint('end_date > start_date', name='ck_subscription_interval'),
        sa.ForeignKeyConstraint(['plan_id'], ['plans.id'], ondelete='RESTRICT'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='RESTRICT'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_subscriptions_user_id', 'subscriptions', ['user_id'])
    op.create_index('ix_subscriptions_plan_id', 'subscriptions', ['plan_id'])
    op.create_index('ix_subscriptions_status', 'subscriptions', ['status'])

    op.create_table(
        'payment_proofs',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('image_url', sa.String(length=512), nullable=False),
        sa.Column('status', PAY_STATUS, nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('subscription_id', sa.Integer(), nullable=False),
        sa.Column('reviewed_by', sa.Integer(), nullable=True),
        sa.Column('reviewed_at', sa.DateTime(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['reviewed_by'], ['users.id'], ondelete='RESTRICT'),
        sa.ForeignKeyConstraint(['subscription_id'], ['subscriptions.id'], ondelete='RESTRICT'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='RESTRICT'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_payment_proofs_status', 'payment_proofs', ['status'])
    op.create_index('ix_payment_proofs_user_id', 'payment_proofs', ['user_id'])
    op.create_index('ix_payment_proofs_subscription_id', 'payment_proofs', ['subscription_id'])

    # ---------- courses ----------
    op.create_table(
        'categories',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=120), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('name'),
    )

    op.create_table(
        'courses',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('slug', sa.String(length=120), nullable=False),
        sa.Column('title', sa.String(length=200), nullable=False),
        sa.Column('subtitle', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('duration', sa.Integer(), nullable=False),
        sa.Column('level', sa.String(length=40), nullable=False),
        sa.Column('category_id', sa.Integer(), nullable=False),
        sa.Column('is_featured', sa.Boolean(), nullable=False),
        sa.Column('preview_video_url', sa.String(length=512), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['category_id'], ['categories.id'], ondelete='RESTRICT'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_courses_slug', 'courses', ['slug'], unique=True)
    op.create_index('ix_courses_category_id', 'courses', ['category_id'])

    op.create_table(
        'lessons',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('course_id', sa.Integer(), nullable=False),
        sa.Column('title', sa.String(length=200), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('order', sa.Integer(), nullable=False),
        sa.Column('duration', sa.Integer(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['course_id'], ['courses.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_lessons_course_id', 'lessons', ['course_id'])

    op.create_table(
        'learning_objectives',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('course_id', sa.Integer(), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.ForeignKeyConstraint(['course_id'], ['courses.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_learning_objectives_course_id', 'learning_objectives', ['course_id'])

    op.create_table(
        'enrollments',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('course_id', sa.Integer(), nullable=False),
        sa.Column('progress', sa.Integer(), nullable=False),
        sa.Column('completed_at', sa.DateTime(), nullable=True),
        *_timestamps(),
        sa.CheckConstraint('progress >= 0 AND progress <= 100', name='ck_enrollment_progress'),
        sa.ForeignKeyConstraint(['course_id'], ['courses.id'], ondelete='RESTRICT'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='RESTRICT'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id', 'course_id', name='uq_enrollment_user_course'),
    )
    op.create_index('ix_enrollments_user_id', 'enrollments', ['user_id'])
    op.create_index('ix_enrollments_course_id', 'enrollments', ['course_id'])

    op.create_table(
        'lesson_completions',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('enrollment_id', sa.Integer(), nullable=False),
        sa.Column('lesson_id', sa.Integer(), nullable=False),
        sa.Column('completed_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['enrollment_id'], ['enrollments.id'], ondelete='RESTRICT'),
        sa.ForeignKeyConstraint(['lesson_id'], ['lessons.id'], ondelete='RESTRICT'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('enrollment_id', 'lesson_id', name='uq_completion_enrollment_lesson'),
    )
    op.create_index('ix_lesson_completions_enrollment_id', 'lesson_completions', ['enrollment_id'])
    op.create_index('ix_lesson_completions_lesson_id', 'lesson_completions', ['lesson_id'])

    # ---------- events ----------
    op.create_table(
        'events',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('title', sa.String(length=200), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('start_date', sa.DateTime(), nullable=False),
        sa.Column('end_date', sa.DateTime(), nullable=False),
        sa.Column('location', sa.String(length=255), nullable=False),
        sa.Column('banner_url', sa.String(length=512), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_events_start_date', 'events', ['start_date'])

    op.create_table(
        'user_events',
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('event_id', sa.Integer(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['event_id'], ['events.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('user_id', 'event_id'),
    )

    # ---------- onboarding worksheets ----------
    discovery_lists = [
        'strengths', 'weaknesses', 'opportunities', 'achievements', 'threats',
        'family_aspirations', 'career_aspirations', 'financial_business_aspirations',
        'social_aspirations', 'desired_position', 'required_skills',
        'courses_and_trainings', 'strategies', 'short_term_goals',
    ]
    op.create_table(
        'personal_discoveries',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        *[sa.Column(name, sa.JSON(), nullable=False) for name in discovery_lists],
        sa.Column('document_analysis', sa.Text(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='RESTRICT'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id'),
    )

    op.create_table(
        'scholarship_assessments',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('education_level', sa.String(length=120), nullable=False),
        sa.Column('field_preference', sa.String(length=120), nullable=False),
        sa.Column('age_range', sa.String(length=40), nullable=False),
        sa.Column('gender', sa.String(length=20), nullable=False),
        sa.Column('employment_preference', sa.String(length=120), nullable=False),
        sa.Column('self_employment_type', sa.String(length=120), nullable=True),
        sa.Column('career_sector', sa.String(length=120), nullable=False),
        sa.Column('unpaid_passion', sa.Text(), nullable=False),
        sa.Column('personal_passion', sa.Text(), nullable=False),
        sa.Column('life_goal', sa.Text(), nullable=False),
        sa.Column('future_title', sa.String(length=200), nullable=False),
        sa.Column('future_tasks', sa.Text(), nullable=False),
        sa.Column('required_skills', sa.Text(), nullable=False),
        sa.Column('desired_courses', sa.Text(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='RESTRICT'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id'),
    )

    op.create_table(
        'cvs',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('file_name', sa.String(length=255), nullable=False),
        sa.Column('file_url', sa.String(length=512), nullable=False),
        sa.Column('analysis_result', sa.Text(), nullable=True),
        sa.Column('uploaded_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='RESTRICT'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id'),
    )

    # ---------- career assessment ----------
    op.create_table(
        'career_users',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=120), nullable=False),
        sa.Column('email', sa.String(length=120), nullable=True),
        sa.Column('age', sa.String(length=20), nullable=False),
        sa.Column('gender', sa.String(length=20), nullable=True),
        sa.Column('location', sa.String(length=120), nullable=True),
        sa.Column('is_authenticated', sa.Boolean(), nullable=False),
        sa.Column('auth_user_id', sa.Integer(), nullable=True),
        sa.Column('access_token', sa.String(length=64), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('access_token'),
    )
    op.create_index('ix_career_users_email', 'career_users', ['email'])
    op.create_index('ix_career_users_auth_user_id', 'career_users', ['auth_user_id'], unique=True)

    op.create_table(
        'career_assessments',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('career_user_id', sa.Integer(), nullable=False),
        sa.Column('status', ASSESS_STATUS, nullable=False),
        sa.Column('completed_at', sa.DateTime(), nullable=True),
        sa.Column('education', sa.String(length=120), nullable=False),
        sa.Column('field', sa.String(length=120), nullable=False),
        sa.Column('employment', sa.String(length=120), nullable=False),
        sa.Column('self_employment', sa.String(length=120), nullable=True),
        sa.Column('sector', sa.String(length=120), nullable=False),
        sa.Column('passion', sa.Text(), nullable=False),
        sa.Column('life_passion', sa.Text(), nullable=False),
        sa.Column('life_goal', sa.Text(), nullable=False),
        sa.Column('future_title', sa.String(length=200), nullable=False),
        sa.Column('future_tasks', sa.Text(), nullable=False),
        sa.Column('required_skills', sa.Text(), nullable=False),
        sa.Column('required_courses', sa.Text(), nullable=False),
        sa.Column('suggested_career', sa.String(length=200), nullable=True),
        sa.Column('confidence_score', sa.Float(), nullable=True),
        sa.Column('matching_factors', sa.JSON(), nullable=False),
        sa.Column('is_shared', sa.Boolean(), nullable=False),
        sa.Column('share_code', sa.String(length=32), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['career_user_id'], ['career_users.id'], ondelete='RESTRICT'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('share_code'),
    )
    op.create_index('ix_career_assessments_career_user_id', 'career_assessments', ['career_user_id'])
    op.create_index('ix_career_assessments_status', 'career_assessments', ['status'])

    op.create_table(
        'user_feedback',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('assessment_id', sa.Integer(), nullable=False),
        sa.Column('rating', sa.Integer(), nullable=False),
        sa.Column('is_relevant', sa.Boolean(), nullable=False),
        sa.Column('would_recommend', sa.Boolean(), nullable=False),
        sa.Column('comments', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.CheckConstraint('rating >= 1 AND rating <= 5', name='ck_feedback_rating'),
        sa.ForeignKeyConstraint(['assessment_id'], ['career_assessments.id'], ondelete='RESTRICT'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('assessment_id'),
    )

    op.create_table(
        'career_analytics',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('career_path', sa.String(length=200), nullable=False),
        sa.Column('total_suggestions', sa.Integer(), nullable=False),
        sa.Column('average_confidence', sa.Float(), nullable=False),
        sa.Column('positive_ratings', sa.Integer(), nullable=False),
        sa.Column('negative_ratings', sa.Integer(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('career_path'),
    )

    op.create_table(
        'analytics_index',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('date', sa.DateTime(), nullable=False),
        sa.Column('total_users', sa.Integer(), nullable=False),
        sa.Column('active_users', sa.Integer(), nullable=False),
        sa.Column('completion_rate', sa.Float(), nullable=False),
        sa.Column('new_assessments', sa.Integer(), nullable=False),
        sa.Column('completed_assessments', sa.Integer(), nullable=False),
        sa.Column('shared_results', sa.Integer(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_analytics_index_date', 'analytics_index', ['date'])

    # ---------- informational content ----------
    op.create_table(
        'mentors',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=120), nullable=False),
        sa.Column('title', sa.String(length=160), nullable=True),
        sa.Column('bio', sa.Text(), nullable=False),
        sa.Column('expertise', sa.JSON(), nullable=False),
        sa.Column('avatar', sa.String(length=512), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_table(
        'team_members',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=120), nullable=False),
        sa.Column('role', sa.String(length=120), nullable=False),
        sa.Column('bio', sa.Text(), nullable=False),
        sa.Column('avatar', sa.String(length=512), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_table(
        'testimonials',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('author', sa.String(length=120), nullable=False),
        sa.Column('rating', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_table(
        'publications',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('authors', sa.String(length=255), nullable=False),
        sa.Column('abstract', sa.Text(), nullable=False),
        sa.Column('external_url', sa.String(length=512), nullable=False),
        sa.Column('published_date', sa.DateTime(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_table(
        'downloadable_resources',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('file_url', sa.String(length=512), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_table(
        'contacts',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=120), nullable=False),
        sa.Column('email', sa.String(length=120), nullable=False),
        sa.Column('subject', sa.String(length=200), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_table(
        'feedback',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='RESTRICT'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_feedback_user_id', 'feedback', ['user_id'])


def downgrade():
    for table in (
        'feedback', 'contacts', 'downloadable_resources', 'publications', 'testimonials',
        'team_members', 'mentors', 'analytics_index', 'career_analytics', 'user_feedback',
        'career_assessments', 'career_users', 'cvs', 'scholarship_assessments',
        'personal_discoveries', 'user_events', 'events', 'lesson_completions', 'enrollments',
        'learning_objectives', 'lessons', 'courses', 'categories', 'payment_proofs',
        'subscriptions', 'plans', 'notifications', 'user_profiles', 'users',
    ):
        op.drop_table(table)
