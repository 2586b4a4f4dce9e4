"""initial schema: users, gestures, relations, achievements, usage state

Revision ID: 20261019120000
Revises:
Create Date: 2026-10-19 12:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '20261019120000'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create all tables."""
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('nombre', sa.String(length=255), nullable=False),
        sa.Column('correo', sa.String(length=255), nullable=False),
        sa.Column('password_hash', sa.String(), nullable=False),
        sa.Column('rol', sa.String(length=32), nullable=False, server_default='estudiante'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.Column('last_active', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_users_id'), 'users', ['id'], unique=False)
    op.create_index(op.f('ix_users_correo'), 'users', ['correo'], unique=True)

    op.create_table(
        'gestures',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('nombre', sa.String(length=255), nullable=False),
        sa.Column('descripcion', sa.Text(), nullable=False),
        sa.Column('categoria', sa.String(length=255), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_gestures_id'), 'gestures', ['id'], unique=False)

    op.create_table(
        'user_gestures',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('gesture_id', sa.Integer(), nullable=False),
        sa.Column('porcentaje', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('estado', sa.String(length=32), nullable=False, server_default='pendiente'),
        sa.Column('last_updated', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['gesture_id'], ['gestures.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id', 'gesture_id', name='uq_user_gesture'),
    )
    op.create_index(op.f('ix_user_gestures_id'), 'user_gestures', ['id'], unique=False)
    op.create_index(op.f('ix_user_gestures_user_id'), 'user_gestures', ['user_id'], unique=False)
    op.create_index(op.f('ix_user_gestures_gesture_id'), 'user_gestures', ['gesture_id'], unique=False)

    op.create_table(
        'teacher_students',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('teacher_id', sa.Integer(), nullable=False),
        sa.Column('student_id', sa.Integer(), nullable=False),
        sa.Column('estado', sa.String(length=32), nullable=False, server_default='pendiente'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.ForeignKeyConstraint(['teacher_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['student_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('teacher_id', 'student_id', name='uq_teacher_student'),
    )
    op.create_index(op.f('ix_teacher_students_id'), 'teacher_students', ['id'], unique=False)
    op.create_index(op.f('ix_teacher_students_teacher_id'), 'teacher_students', ['teacher_id'], unique=False)
    op.create_index(op.f('ix_teacher_students_student_id'), 'teacher_students', ['student_id'], unique=False)

    op.create_table(
        'achievements',
        sa.Column('id', sa.Integer(), autoincrement=False, nullable=False),
        sa.Column('titulo', sa.String(length=255), nullable=False),
        sa.Column('descripcion', sa.Text(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )

    op.create_table(
        'user_achievements',
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('achievement_id', sa.Integer(), nullable=False),
        sa.Column('obtained_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['achievement_id'], ['achievements.id']),
        sa.PrimaryKeyConstraint('user_id', 'achievement_id'),
    )

    op.create_table(
        'usage_state',
        sa.Column('installation_id', sa.String(length=128), nullable=False),
        sa.Column('last_use', sa.Date(), nullable=True),
        sa.Column('streak', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('last_report', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('installation_id'),
    )


def downgrade() -> None:
    """Drop all tables."""
    op.drop_table('usage_state')
    op.drop_table('user_achievements')
    op.drop_table('achievements')
    op.drop_index(op.f('ix_teacher_students_student_id'), table_name='teacher_students')
    op.drop_index(op.f('ix_teacher_students_teacher_id'), table_name='teacher_students')
    op.drop_index(op.f('ix_teacher_students_id'), table_name='teacher_students')
    op.drop_table('teacher_students')
    op.drop_index(op.f('ix_user_gestures_gesture_id'), table_name='user_gestures')
    op.drop_index(op.f('ix_user_gestures_user_id'), table_name='user_gestures')
    op.drop_index(op.f('ix_user_gestures_id'), table_name='user_gestures')
    op.drop_table('user_gestures')
    op.drop_index(op.f('ix_gestures_id'), table_name='gestures')
    op.drop_table('gestures')
    op.drop_index(op.f('ix_users_correo'), table_name='users')
    op.drop_index(op.f('ix_users_id'), table_name='users')
    op.drop_table('users')
