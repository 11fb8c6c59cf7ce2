#!/usr/bin/env python3
"""Seed database with sample data.

Creates:
- ~35 sample deals across camping, kitchen, tech, lifestyle, parenting and
  fashion (with risk cues sprinkled in so trust scores vary)
- Two interest profiles: p_camping_user, p_kitchen_user

Seeding is skipped when either table already has rows. Posting times and
popularity are derived from the row index so repeated seeds are identical
relative to "now".

Usage:
    alembic upgrade head
    python -m scripts.seed
"""

import asyncio
import json
import os
import sys
from datetime import datetime, timedelta, timezone

# Add parent to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from dotenv import load_dotenv
from sqlalchemy.ext.asyncio import AsyncSession

from dealsense.models import Deal
from dealsense.services.dedup import generate_fingerprint
from dealsense.services.normalize import calculate_discount_rate
from dealsense.services.trust import calculate_trust_score
from dealsense.stores.deals import count_deals, upsert_deal
from dealsense.stores.postgres import close_db, get_session, init_db
from dealsense.stores.profiles import count_profiles, upsert_profile

load_dotenv()

# ============================================================
# Sample deals: (title, price_current, price_original, category, merchant)
# ============================================================

SAMPLE_DEALS = [
    # Camping
    ("코베아 2인용 텐트 초특가", 45000, 89000, "캠핑", "캠핑코리아"),
    ("스노우피크 침낭 겨울용 무료배송", 120000, 180000, "캠핑", "아웃도어플라자"),
    ("LED 캠핑 랜턴 3개세트 쿠폰적용", 25000, 45000, "캠핑", "11번가"),
    ("티타늄 코펠 세트 옵션선택", 38000, 58000, "캠핑", "지마켓"),
    ("캠핑용 접이식 테이블 특가", 32000, 52000, "캠핑", "쿠팡"),
    ("코베아 버너 리퍼상품", 28000, 65000, "캠핑", "캠핑마트"),
    ("캠핑 의자 2+1 이벤트", 19000, 39000, "캠핑", "네이버쇼핑"),
    ("백패킹 침낭 중고급", 42000, 95000, "캠핑", "중고나라"),
    # Kitchen
    ("쿠쿠 전기압력밥솥 6인용 핫딜", 89000, 150000, "주방", "쿠팡"),
    ("스테인리스 냄비세트 10종 무료배송", 28000, 58000, "주방", "SSG"),
    ("에어프라이어 5L 대용량 특가", 45000, 89000, "주방", "11번가"),
    ("세라믹 프라이팬 3종세트 옵션", 19000, 35000, "주방", "지마켓"),
    ("쿠쿠 믹서기 리퍼상품", 32000, 78000, "주방", "인터파크"),
    ("주방용품 복주머니 랜덤발송", 9900, 30000, "주방", "티몬"),
    ("전기포트 1.7L 당일배송", 15000, 28000, "주방", "쿠팡"),
    # Tech
    ("삼성 무선이어폰 갤럭시버즈", 68000, 120000, "테크", "네이버쇼핑"),
    ("Apple 에어팟 프로 2세대 품절임박", 289000, 359000, "테크", "애플스토어"),
    ("LG 모니터 27인치 IPS 핫딜", 159000, 289000, "테크", "컴퓨존"),
    ("기계식키보드 청축 RGB 특가", 42000, 89000, "테크", "다나와"),
    ("게이밍마우스 로지텍 중고A급", 28000, 75000, "테크", "중고장터"),
    ("USB-C 허브 8포트 해외배송", 18000, 38000, "테크", "알리익스프레스"),
    ("삼성 외장SSD 1TB 무료배송", 78000, 130000, "테크", "SSG"),
    # Lifestyle
    ("프리미엄 수건세트 10장 호텔용", 19000, 45000, "생활", "쿠팡"),
    ("세탁세제 대용량 6L 특가", 12000, 22000, "생활", "홈플러스"),
    ("LED 스탠드 눈보호 학생용", 23000, 48000, "생활", "11번가"),
    ("공기청정기 소형 예약배송", 55000, 98000, "생활", "지마켓"),
    ("행거 10개입 옷걸이세트", 8900, 18000, "생활", "다이소온라인"),
    # Parenting
    ("분유 3단계 800g 6캔 무료배송", 98000, 140000, "육아", "맘스맘"),
    ("기저귀 밴드형 신생아 4팩", 42000, 68000, "육아", "쿠팡"),
    ("유모차 절충형 리퍼상품", 158000, 380000, "육아", "중고마켓"),
    ("아기띠 신생아용 옵션확인", 35000, 78000, "육아", "지마켓"),
    ("젖병소독기 UV 살균 특가", 45000, 89000, "육아", "네이버쇼핑"),
    # Fashion
    ("나이키 운동화 에어맥스 핫딜", 79000, 139000, "패션", "무신사"),
    ("아디다스 후드티 3종 옵션", 38000, 79000, "패션", "SSG"),
    ("청바지 스키니핏 배송비별도", 22000, 58000, "패션", "패션플러스"),
    ("겨울패딩 구스다운 품절임박", 128000, 298000, "패션", "쿠팡"),
    ("가죽벨트 남성용 2+1", 15000, 35000, "패션", "11번가"),
]

SOURCES = ("community", "shop", "manual")
CONDITIONS = ["온라인 한정", "일부 옵션 제외"]
DEFAULT_SHIPPING_FEE = 3000

SAMPLE_PROFILES = [
    {
        "profile_id": "p_camping_user",
        "categories": ["캠핑", "아웃도어"],
        "keywords": ["텐트", "침낭", "랜턴", "코펠"],
        "brands": ["코베아", "스노우피크"],
        "price_max": 50000,
        "min_discount_rate": 20,
        "exclude_keywords": ["중고", "리퍼"],
    },
    {
        "profile_id": "p_kitchen_user",
        "categories": ["주방", "생활"],
        "keywords": ["냄비", "프라이팬", "에어프라이어"],
        "brands": ["쿠쿠"],
        "price_max": 30000,
        "min_discount_rate": None,
        "exclude_keywords": ["리퍼"],
    },
]


def build_sample_deal(index: int, now: datetime) -> Deal:
    """Build the sample deal at `index` with derived fields."""
    title, price_current, price_original, category, merchant = SAMPLE_DEALS[index]
    free_shipping = "무료배송" in title
    extra = {
        "conditions": CONDITIONS,
        "shipping_info": "무료배송" if free_shipping else "배송비 별도",
        "shipping_fee": None if free_shipping else DEFAULT_SHIPPING_FEE,
    }

    deal = Deal(
        deal_id=f"d_{index + 1:04d}",
        title=title,
        price_current=price_current,
        price_original=price_original,
        discount_rate=calculate_discount_rate(price_current, price_original),
        source=SOURCES[index % 3],
        merchant=merchant,
        url=f"https://example.com/deals/{index + 1}",
        category=category,
        posted_at=now - timedelta(hours=(index * 17) % 168),
        popularity_score=round(0.2 + ((index * 37) % 76) / 100, 2),
        extra_json=json.dumps(extra, ensure_ascii=False),
    )
    deal.fingerprint = generate_fingerprint(deal)
    deal.trust_score = calculate_trust_score(deal, now)
    return deal


async def seed_deals(session: AsyncSession, now: datetime) -> int:
    """Insert sample deals."""
    for index in range(len(SAMPLE_DEALS)):
        await upsert_deal(session, build_sample_deal(index, now))
    return len(SAMPLE_DEALS)


async def seed_profiles(session: AsyncSession) -> int:
    """Insert sample profiles."""
    for profile_def in SAMPLE_PROFILES:
        await upsert_profile(session, **profile_def)
        print(f"  ✅ {profile_def['profile_id']}")
    return len(SAMPLE_PROFILES)


async def seed_database() -> None:
    """Seed database with sample data (skipped when already seeded)."""
    await init_db()
    try:
        async with get_session() as session:
            if await count_deals(session) > 0 or await count_profiles(session) > 0:
                print("Database already seeded, skipping...")
                return

            print("🌱 Seeding database...")
            now = datetime.now(timezone.utc)

            print("\n🏷️  Creating deals...")
            deal_count = await seed_deals(session, now)

            print("\n👤 Creating profiles...")
            profile_count = await seed_profiles(session)

        print(f"\n✅ Seeded {deal_count} deals and {profile_count} profiles")
    finally:
        await close_db()


if __name__ == "__main__":
    asyncio.run(seed_database())
