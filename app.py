import copy

import streamlit as st
from sipbuddy.core.estimator import even_splits, rebalance_splits
from sipbuddy.models.product import RecommendationView
from sipbuddy.pipelines.app_service import AppService

st.set_page_config(layout="wide", page_title="SipBuddy")

@st.cache_resource
def get_service() -> AppService:
    return AppService()

service = get_service()

# ---------- Global CSS ----------
st.markdown("""
<style>
body, .main, .stApp {
    background-color: #0f0a16;
    color: #ece6f0;
}
.block-container {
    padding-top: 2.8rem;
    padding-bottom: 1.5rem;
}

/* Hero area */
.hero-title {
    font-size: 30px;
    font-weight: 800;
    background: linear-gradient(90deg, #ffb35a, #ff7b9f);
    -webkit-background-clip: text;
    color: transparent;
}
.hero-subtitle {
    font-size: 14px;
    color: #c6a7b9;
}

/* Product cards */
.product-card {
    border: 1px solid #2a1f3a;
    border-radius: 14px;
    padding: 14px 16px;
    margin-bottom: 12px;
    background: radial-gradient(circle at top left, #2a1a40 0%, #0f0a16 55%);
    box-shadow: 0 4px 10px rgba(0,0,0,0.7);
}
.product-title {
    font-weight: 700;
    font-size: 17px;
    margin-bottom: 4px;
    color: #ffffff;
}
.product-price {
    font-size: 15px;
    font-weight: 600;
    color: #ffc861;
}
.product-meta {
    font-size: 13px;
    color: #e0d6e0;
}

/* Badges */
.badge {
    display: inline-block;
    padding: 2px 8px;
    border-radius: 999px;
    font-size: 11px;
    font-weight: 600;
    margin-right: 6px;
    background: rgba(255, 123, 159, 0.16);
    color: #ff9fb9;
    border: 1px solid rgba(255, 123, 159, 0.4);
}

/* Quantity cards */
.qty-card {
    border: 1px solid #3a2f1f;
    border-radius: 14px;
    padding: 12px 16px;
    margin-bottom: 12px;
    background-color: #1a1208;
}
.qty-number {
    font-size: 26px;
    font-weight: 800;
    color: #ffb35a;
}
</style>
""", unsafe_allow_html=True)

# ---------- Wizard state ----------
DEFAULTS = {
    "step": 1,
    "flow": None,
    "cats": [],
    "budget": 100,
    "guests": 20,
    "hours": 4,
    "splits": {},
    "selected_tags": {},
    "recs": {},
    "estimate": {},
}
for key, value in DEFAULTS.items():
    if key not in st.session_state:
        st.session_state[key] = value
state = st.session_state


def go(step: int) -> None:
    state.step = step


def restart() -> None:
    for key, value in DEFAULTS.items():
        state[key] = copy.deepcopy(value)


def on_split_change(cat: str) -> None:
    state.splits = rebalance_splits(state.cats, cat, state[f"split_{cat}"])
    for other, pct in state.splits.items():
        state[f"split_{other}"] = pct


def max_spend() -> float:
    # party picks are not budget-bound
    return state.budget if state.flow == "myself" else 10000


def fetch_recs(limit: int) -> None:
    state.recs = {
        c: service.get_recommendations(c, max_price=max_spend(), tags=state.selected_tags.get(c, []), limit=limit)
        for c in state.cats
    }


def swap_one(cat: str, idx: int) -> None:
    fresh = service.get_recommendations(cat, max_price=max_spend(), tags=state.selected_tags.get(cat, []), limit=1)
    if fresh:
        state.recs[cat][idx] = fresh[0]


def product_card(p: RecommendationView) -> str:
    badges = "".join(f"<span class='badge'>{t}</span>" for t in p.tags)
    link = f"<a href='{p.purchase_link}' target='_blank'>Buy</a>" if p.purchase_link else ""
    return f"""
        <div class="product-card">
            <img src="{p.image}" width="64" style="float:right;border-radius:8px"/>
            <div class="product-title">{p.name}</div>
            <div class="product-meta">{badges}</div>
            <div class="product-price">${p.price:.2f}</div>
            <div class="product-meta">{p.size} {link}</div>
        </div>
    """


# ---------- Hero header ----------
st.markdown('<div class="hero-title">SipBuddy</div>', unsafe_allow_html=True)
st.markdown(
    '<div class="hero-subtitle">'
    'Tell us who you are shopping for and we will pick beer, wine and ready-to-drinks to match.</div>',
    unsafe_allow_html=True
)
st.progress(state.step / 4, text=f"Step {state.step} of 4")
st.write("")

# ---------- Step 1: who is it for ----------
if state.step == 1:
    st.subheader("Who are you shopping for?")
    c1, c2 = st.columns(2)
    if c1.button("🍷 Just for me", use_container_width=True):
        state.flow = "myself"
        go(2)
        st.rerun()
    if c2.button("🎉 I'm hosting a party", use_container_width=True):
        state.flow = "party"
        go(2)
        st.rerun()

# ---------- Step 2: categories plus budget or party size ----------
elif state.step == 2:
    cats = st.multiselect("What are you in the mood for?", service.list_categories(), default=state.cats)
    if cats != state.cats:
        state.cats = cats
        state.splits = even_splits(cats)
        for cat, pct in state.splits.items():
            state[f"split_{cat}"] = pct

    if state.flow == "myself":
        state.budget = st.slider("Max price per item ($)", 5, 500, int(state.budget), 5)
    else:
        g, h = st.columns(2)
        state.guests = g.number_input("Guests", min_value=0, value=int(state.guests), step=1)
        state.hours = h.number_input("Hours", min_value=0, value=int(state.hours), step=1)
        if len(state.cats) > 1:
            st.markdown("**How should drinks be split?**")
            for cat in state.cats:
                if f"split_{cat}" not in state:
                    state[f"split_{cat}"] = state.splits.get(cat, 0)
                st.slider(f"{cat} %", 0, 100, key=f"split_{cat}", on_change=on_split_change, args=(cat,))

    back, nxt = st.columns(2)
    back.button("← Back", on_click=go, args=(1,))
    if nxt.button("Next →", disabled=not state.cats):
        go(3)
        st.rerun()

# ---------- Step 3: tags ----------
elif state.step == 3:
    st.subheader("Any favourites?")
    for cat in state.cats:
        options = service.get_category_tags(cat)
        state.selected_tags[cat] = st.multiselect(
            f"{cat} styles", options=options, default=[t for t in state.selected_tags.get(cat, []) if t in options],
            key=f"tags_{cat}",
        )

    back, nxt = st.columns(2)
    back.button("← Back", on_click=go, args=(2,))
    if nxt.button("✨ Show my picks"):
        if state.flow == "party":
            state.estimate = service.estimate_party(state.guests, state.hours, splits=state.splits)
            fetch_recs(limit=3)
        else:
            fetch_recs(limit=5)
        go(4)
        st.rerun()

# ---------- Step 4: results ----------
else:
    if state.flow == "party" and state.estimate:
        st.subheader("What to buy")
        cols = st.columns(len(state.estimate))
        for col, (cat, info) in zip(cols, state.estimate.items()):
            col.markdown(
                f"""
                <div class="qty-card">
                    <div class="product-meta">{cat}</div>
                    <div class="qty-number">{info["quantity"]} {info["unit"]}</div>
                    <div class="product-meta">{info["size"]}</div>
                    <div class="product-meta">{info["totalServings"]} total servings</div>
                </div>
                """,
                unsafe_allow_html=True,
            )

    if state.cats:
        tabs = st.tabs(state.cats)
        for tab, cat in zip(tabs, state.cats):
            with tab:
                picks = state.recs.get(cat, [])
                if not picks:
                    st.write("Nothing matches those filters yet. Try a higher budget or fewer styles.")
                    continue
                for idx, p in enumerate(picks):
                    st.markdown(product_card(p), unsafe_allow_html=True)
                    st.button("🔄 Swap", key=f"swap_{cat}_{idx}", on_click=swap_one, args=(cat, idx))
                with st.expander("How these were picked"):
                    fig = service.build_visualization(cat, picks)
                    if fig:
                        st.pyplot(fig)

    back, again, reset = st.columns(3)
    back.button("← Back", on_click=go, args=(3,))
    again.button("🔀 Swap all", on_click=fetch_recs, args=(3 if state.flow == "party" else 5,))
    reset.button("Start over", on_click=restart)
