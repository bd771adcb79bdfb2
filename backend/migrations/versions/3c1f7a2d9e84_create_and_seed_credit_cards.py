"""Create and seed credit cards table

Revision ID: 3c1f7a2d9e84
Revises:
Create Date: 2026-10-19 10:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3c1f7a2d9e84'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'credit_cards',
        sa.Column('card_id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('issuer', sa.String(length=255), nullable=False),
        sa.Column('joining_fee', sa.Numeric(precision=12, scale=2), server_default=sa.text('0'), nullable=False),
        sa.Column('annual_fee', sa.Numeric(precision=12, scale=2), server_default=sa.text('0'), nullable=False),
        sa.Column('reward_type', sa.Enum('Cashback', 'Points', name='reward_type'), nullable=False),
        sa.Column('reward_rate', sa.String(length=255), server_default='', nullable=False),
        sa.Column('min_income', sa.Numeric(precision=14, scale=2), server_default=sa.text('0'), nullable=False),
        sa.Column('min_credit_score', sa.Integer(), server_default=sa.text('0'), nullable=False),
        sa.Column('special_perks', sa.Text(), server_default='[]', nullable=False),
        sa.Column('categories', sa.Text(), server_default='[]', nullable=False),
        sa.Column('apply_link', sa.String(length=512), nullable=True),
        sa.Column('card_image', sa.String(length=255), nullable=True),
        sa.CheckConstraint('joining_fee >= 0', name='ck_joining_fee_non_negative'),
        sa.CheckConstraint('annual_fee >= 0', name='ck_annual_fee_non_negative'),
        sa.CheckConstraint('min_income >= 0', name='ck_min_income_non_negative'),
        sa.CheckConstraint('min_credit_score >= 0 AND min_credit_score <= 900', name='ck_min_credit_score_range'),
        sa.PrimaryKeyConstraint('card_id')
    )
    op.create_index(op.f('ix_credit_cards_card_id'), 'credit_cards', ['card_id'], unique=False)

    # Deterministic seed data for shared dev DBs.
    op.execute(
        """
        INSERT INTO credit_cards (card_id, name, issuer, joining_fee, annual_fee, reward_type, reward_rate,
                                  min_income, min_credit_score, special_perks, categories, apply_link, card_image)
        VALUES
          (1, 'HDFC Regalia Gold', 'HDFC Bank', 2500, 2500, 'Points', '4 points per Rs. 150', 600000, 750,
           '["Airport lounge access", "Concierge services", "Dining privileges", "Travel insurance", "Golf program"]',
           '["travel", "dining", "premium"]', 'https://www.hdfcbank.com/regalia-gold', '/images/regalia-gold.png'),
          (2, 'SBI SimplyClick', 'SBI Card', 499, 499, 'Cashback', '5% on online spending', 200000, 700,
           '["Online shopping rewards", "Movie ticket discounts", "Fuel surcharge waiver", "Welcome benefits"]',
           '["online", "entertainment"]', 'https://www.sbicard.com/simplyclick', '/images/simplyclick.png'),
          (3, 'ICICI Amazon Pay', 'ICICI Bank', 0, 500, 'Cashback', '5% on Amazon, 2% others', 300000, 700,
           '["Amazon Prime benefits", "Fuel surcharge waiver", "No joining fee", "Welcome benefits"]',
           '["online", "fuel"]', 'https://www.icicibank.com/amazon-pay', '/images/amazon-pay.png'),
          (4, 'Axis Magnus', 'Axis Bank', 12500, 12500, 'Points', '12 Edge Miles per Rs. 200', 1500000, 750,
           '["Golf privileges", "Airport transfers", "Priority Pass", "Concierge services", "Travel insurance"]',
           '["travel", "premium"]', 'https://www.axisbank.com/magnus', '/images/magnus.png'),
          (5, 'Kotak 811', 'Kotak Bank', 0, 0, 'Cashback', '1% on all spends', 150000, 650,
           '["Zero annual fee", "Fuel surcharge waiver", "Welcome benefits"]',
           '["basic", "fuel"]', 'https://www.kotak.com/811', '/images/kotak-811.png'),
          (6, 'HDFC MoneyBack', 'HDFC Bank', 500, 500, 'Cashback', '2% on groceries, fuel', 250000, 700,
           '["Grocery cashback", "Fuel rewards", "Welcome benefits"]',
           '["groceries", "fuel"]', 'https://www.hdfcbank.com/moneyback', '/images/moneyback.png'),
          (7, 'ICICI Coral', 'ICICI Bank', 500, 500, 'Points', '2 points per Rs. 100', 300000, 700,
           '["Movie tickets", "Dining offers", "Welcome benefits"]',
           '["entertainment", "dining"]', 'https://www.icicibank.com/coral', '/images/coral.png'),
          (8, 'SBI Prime', 'SBI Card', 2999, 2999, 'Points', '5 points per Rs. 100 on travel', 500000, 750,
           '["Travel insurance", "Lounge access", "Concierge services", "Welcome benefits"]',
           '["travel"]', 'https://www.sbicard.com/prime', '/images/prime.png'),
          (9, 'Amex Platinum', 'American Express', 60000, 60000, 'Points', '5 Membership Rewards per Rs. 100', 2000000, 800,
           '["Airport lounge access", "Hotel status upgrades", "Concierge services", "Travel insurance", "Golf program"]',
           '["travel", "premium", "luxury"]', 'https://www.americanexpress.com/platinum', '/images/platinum.png'),
          (10, 'Citi Prestige', 'Citi Bank', 15000, 15000, 'Points', '4 ThankYou points per Rs. 100', 1200000, 750,
           '["Airport lounge access", "Hotel status upgrades", "Concierge services", "Travel insurance", "Golf program"]',
           '["travel", "premium"]', 'https://www.citibank.com/prestige', '/images/prestige.png');
        """
    )


def downgrade() -> None:
    op.drop_index(op.f('ix_credit_cards_card_id'), table_name='credit_cards')
    op.drop_table('credit_cards')
