"""Initial schema: admin, catalog, static fields, archives, letters, education

Revision ID: 1a2b3c4d5e6f
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '1a2b3c4d5e6f'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _node_table(name: str, parent_column: str = None, parent_table: str = None):
    """Tabel node hierarki: id, name, description, parent, timestamps"""
    columns = [
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
    ]
    constraints = [sa.PrimaryKeyConstraint('id')]
    if parent_column:
        columns.append(sa.Column(parent_column, sa.Integer(), nullable=False))
        constraints.append(sa.ForeignKeyConstraint([parent_column], [f'{parent_table}.id']))
        constraints.append(sa.UniqueConstraint(parent_column, 'name', name=f'uq_{name}_{parent_column[:-3]}_name'))
    else:
        constraints.append(sa.UniqueConstraint('name', name=f'uq_{name}_name'))
    columns += [
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
    ]
    op.create_table(name, *columns, *constraints)
    if parent_column:
        op.create_index(f'ix_{name}_{parent_column}', name, [parent_column])


def upgrade() -> None:
    # Create admin table
    op.create_table(
        'admin',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('username', sa.String(50), nullable=False),
        sa.Column('name', sa.String(100), nullable=True),
        sa.Column('hashed_password', sa.String(255), nullable=False),
        sa.Column('is_active', sa.Boolean(), default=True),
        sa.Column('last_login', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now()),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('username')
    )
    op.create_index('ix_admin_username', 'admin', ['username'])

    # Archive catalog (3 levels)
    _node_table('categories')
    _node_table('subcategories', 'category_id', 'categories')
    _node_table('positions', 'subcategory_id', 'subcategories')

    # Static field hierarchy (6 levels)
    _node_table('field_categories')
    _node_table('field_subcategories', 'category_id', 'field_categories')
    _node_table('locations', 'subcategory_id', 'field_subcategories')
    _node_table('cabinets', 'location_id', 'locations')
    _node_table('shelves', 'cabinet_id', 'cabinets')
    _node_table('field_positions', 'shelf_id', 'shelves')

    # Create archives table
    op.create_table(
        'archives',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('date', sa.Date(), nullable=True),
        sa.Column('location', sa.String(255), nullable=True),
        sa.Column('image', sa.String(500), nullable=True),
        sa.Column('category_id', sa.Integer(), nullable=True),
        sa.Column('subcategory_id', sa.Integer(), nullable=True),
        sa.Column('position_id', sa.Integer(), nullable=True),
        sa.Column('created_by', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['category_id'], ['categories.id']),
        sa.ForeignKeyConstraint(['subcategory_id'], ['subcategories.id']),
        sa.ForeignKeyConstraint(['position_id'], ['positions.id']),
        sa.ForeignKeyConstraint(['created_by'], ['admin.id'])
    )
    op.create_index('ix_archives_date', 'archives', ['date'])
    op.create_index('ix_archives_category_id', 'archives', ['category_id'])
    op.create_index('ix_archives_subcategory_id', 'archives', ['subcategory_id'])
    op.create_index('ix_archives_position_id', 'archives', ['position_id'])
    op.create_index('ix_archives_created_at', 'archives', ['created_at'])

    # Education reference data
    op.create_table(
        'education_levels',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('name', sa.String(50), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('name')
    )
    op.create_table(
        'faculties',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('name', sa.String(100), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('name')
    )
    op.create_table(
        'programs',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('faculty_id', sa.Integer(), nullable=True),
        sa.Column('level_id', sa.Integer(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['faculty_id'], ['faculties.id']),
        sa.ForeignKeyConstraint(['level_id'], ['education_levels.id'])
    )
    op.create_index('ix_programs_faculty_id', 'programs', ['faculty_id'])
    op.create_index('ix_programs_level_id', 'programs', ['level_id'])

    # Create letters table
    op.create_table(
        'letters',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('sender', sa.String(255), nullable=False),
        sa.Column('recipient', sa.String(255), nullable=False),
        sa.Column('subject', sa.String(500), nullable=False),
        sa.Column('letter_type', sa.String(50), nullable=False),
        sa.Column('current_status', sa.String(255), nullable=True),
        sa.Column('file_path', sa.String(500), nullable=True),
        sa.Column('created_by', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['created_by'], ['admin.id'])
    )
    op.create_index('ix_letters_date', 'letters', ['date'])
    op.create_index('ix_letters_current_status', 'letters', ['current_status'])
    op.create_index('ix_letters_created_at', 'letters', ['created_at'])

    op.create_table(
        'letter_details',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('letter_id', sa.Integer(), nullable=False),
        sa.Column('nim', sa.String(50), nullable=True),
        sa.Column('nama', sa.String(255), nullable=True),
        sa.Column('jenjang_pendidikan', sa.String(50), nullable=True),
        sa.Column('fakultas', sa.String(100), nullable=True),
        sa.Column('program_studi', sa.String(255), nullable=True),
        sa.Column('tanggal_lulus', sa.Date(), nullable=True),
        sa.Column('no_seri', sa.String(100), nullable=True),
        sa.Column('nirl', sa.String(100), nullable=True),
        sa.Column('telepon', sa.String(50), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['letter_id'], ['letters.id']),
        sa.UniqueConstraint('letter_id')
    )

    op.create_table(
        'letter_status_history',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('letter_id', sa.Integer(), nullable=False),
        sa.Column('status', sa.String(255), nullable=False),
        sa.Column('note', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['letter_id'], ['letters.id'])
    )
    op.create_index('ix_letter_status_history_letter_id', 'letter_status_history', ['letter_id'])


def downgrade() -> None:
    op.drop_table('letter_status_history')
    op.drop_table('letter_details')
    op.drop_table('letters')
    op.drop_table('programs')
    op.drop_table('faculties')
    op.drop_table('education_levels')
    op.drop_table('archives')
    for table in ('field_positions', 'shelves', 'cabinets', 'locations',
                  'field_subcategories', 'field_categories',
                  'positions', 'subcategories', 'categories'):
        op.drop_table(table)
    op.drop_table('admin')
