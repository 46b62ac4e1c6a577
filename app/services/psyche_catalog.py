"""
Predicsure AI — Psyche reference data.

Static tables consumed by the scoring engine, the prompt builder, admin
impersonation and the core-question seed script:

* ``PSYCHE_TYPES`` — the twelve stored psyche types with their eight
  behavioural parameters.
* ``QUESTION_MAPPINGS`` — legacy 16-question quiz, option letter to types.
* ``ARCHETYPES`` — the eight display archetypes and the stored type each maps to.
* ``ARCHETYPE_PERSONAS`` — concrete profiles used for test users and
  impersonation.
* ``CATEGORY_INSIGHTS`` — three lines of advice per archetype per category.
* ``CORE_QUESTIONS`` — the eight universal core questions with option scores.
"""

from __future__ import annotations

from typing import Dict, List

PSYCHE_PARAMETER_NAMES: tuple[str, ...] = (
    "risk_appetite",
    "emotional_reactivity",
    "time_consistency",
    "data_orientation",
    "tilt_prone",
    "volatility_tolerance",
    "loyalty_bias",
    "change_aversion",
)

RADAR_TRAITS: tuple[str, ...] = (
    "risk_appetite",
    "emotional_reactivity",
    "time_consistency",
    "data_orientation",
    "volatility_tolerance",
)

DEFAULT_PSYCHE_TYPE = "quiet_strategist"
LOW_CONFIDENCE_PSYCHE_TYPE = "long_term_builder"


def _params(*values: float) -> Dict[str, float]:
    return dict(zip(PSYCHE_PARAMETER_NAMES, values))


# ══════════════════════════════════════════════════════════════════════════
# Stored psyche types (order matters: ties resolve to the earlier type)
# ══════════════════════════════════════════════════════════════════════════

PSYCHE_TYPES: Dict[str, dict] = {
    "quiet_strategist": {
        "display_name": "The Quiet Strategist",
        "description": "You make decisions through careful analysis and strategic thinking. You value clarity, timing, and pattern recognition in all aspects of life.",
        "core_traits": [
            "Analytical and methodical",
            "Values data over emotions",
            "Patient and strategic",
            "Risk-aware and calculated",
        ],
        "decision_making_style": "You prefer to analyze situations thoroughly before acting, looking for patterns and optimal timing. You trust structure and logic over gut feelings.",
        "growth_edge": "Balancing analytical precision with emotional intuition will help you capture opportunities that don't fit neat patterns.",
        "parameters": _params(0.3, 0.3, 0.8, 0.9, 0.2, 0.4, 0.3, 0.6),
    },
    "intuitive_empath": {
        "display_name": "The Intuitive Empath",
        "description": "You navigate life through emotional resonance and intuitive understanding. You sense energy shifts and emotional currents that others miss.",
        "core_traits": [
            "Highly emotionally attuned",
            "Trusts intuition deeply",
            "Sensitive to energy shifts",
            "Values emotional clarity",
        ],
        "decision_making_style": "You make decisions based on how things feel, trusting your intuition and emotional wisdom over pure logic.",
        "growth_edge": "Grounding your intuitive insights with practical structure will help you turn feelings into consistent outcomes.",
        "parameters": _params(0.5, 0.9, 0.5, 0.3, 0.6, 0.5, 0.7, 0.5),
    },
    "ambitious_builder": {
        "display_name": "The Ambitious Builder",
        "description": "You're driven by growth, leverage, and forward momentum. You see opportunities where others see obstacles and move decisively toward expansion.",
        "core_traits": [
            "Growth-oriented and bold",
            "Seeks leverage and acceleration",
            "High-energy decision maker",
            "Opportunity-focused",
        ],
        "decision_making_style": "You make decisions quickly when you see potential for growth, willing to take calculated risks for disproportionate returns.",
        "growth_edge": "Balancing your drive for expansion with sustainable pacing will prevent burnout and increase long-term success.",
        "parameters": _params(0.7, 0.5, 0.6, 0.6, 0.4, 0.7, 0.4, 0.2),
    },
    "escapist_romantic": {
        "display_name": "The Escapist Romantic",
        "description": "You seek meaning, emotional depth, and transformative experiences. You're drawn to beauty, intensity, and the poetry of life.",
        "core_traits": [
            "Emotionally explorative",
            "Seeks meaning and beauty",
            "Values intensity over stability",
            "Self-reflective and introspective",
        ],
        "decision_making_style": "You make decisions based on emotional resonance and the search for deeper meaning, sometimes avoiding harsh realities.",
        "growth_edge": "Grounding your romantic ideals with practical reality will help you build the beautiful life you envision.",
        "parameters": _params(0.6, 0.8, 0.4, 0.2, 0.7, 0.6, 0.8, 0.4),
    },
    "stabilizer": {
        "display_name": "The Stabilizer",
        "description": "You value consistency, security, and steady progress. You build your life on solid foundations and prefer predictable paths.",
        "core_traits": [
            "Values stability and security",
            "Prefers gradual change",
            "Reliable and consistent",
            "Risk-averse and cautious",
        ],
        "decision_making_style": "You make decisions carefully, preferring safe, proven paths over risky ventures. You value long-term security.",
        "growth_edge": "Embracing calculated risks when opportunities arise will accelerate your growth without compromising your foundation.",
        "parameters": _params(0.2, 0.4, 0.9, 0.6, 0.2, 0.3, 0.8, 0.8),
    },
    "momentum_chaser": {
        "display_name": "The Momentum Chaser",
        "description": "You thrive on energy, timing, and riding waves of opportunity. You're drawn to hot streaks and exciting movements.",
        "core_traits": [
            "Energized by momentum",
            "Timing-focused",
            "Responsive to hype and trends",
            "Adrenaline-seeking",
        ],
        "decision_making_style": "You make decisions based on momentum and timing, jumping on opportunities when energy is high.",
        "growth_edge": "Learning to distinguish real momentum from hype will dramatically improve your success rate.",
        "parameters": _params(0.8, 0.7, 0.4, 0.4, 0.7, 0.8, 0.3, 0.2),
    },
    "emotional_fan": {
        "display_name": "The Emotional Fan",
        "description": "You lead with your heart, driven by loyalty and passion. Your decisions are colored by deep emotional connections.",
        "core_traits": [
            "Heart-led decision maker",
            "Deeply loyal",
            "Emotionally invested",
            "Values connection over logic",
        ],
        "decision_making_style": "You make decisions based on emotional attachment and loyalty, sometimes overlooking objective data.",
        "growth_edge": "Balancing emotional loyalty with objective analysis will protect you from self-sabotage.",
        "parameters": _params(0.5, 0.9, 0.5, 0.3, 0.7, 0.4, 0.9, 0.6),
    },
    "pattern_analyst": {
        "display_name": "The Pattern Analyst",
        "description": "You see trends, streaks, and patterns that others miss. You trust systematic analysis and repeatable structures.",
        "core_traits": [
            "Pattern recognition expert",
            "Systematic and logical",
            "Data-driven",
            "Consistency-focused",
        ],
        "decision_making_style": "You make decisions based on identified patterns and trends, trusting repeatable systems over emotions.",
        "growth_edge": "Incorporating emotional intelligence into your pattern analysis will help you catch shifts that data alone can't predict.",
        "parameters": _params(0.4, 0.3, 0.8, 0.9, 0.2, 0.5, 0.4, 0.5),
    },
    "revenge_bettor": {
        "display_name": "The Revenge Bettor",
        "description": "You're driven by the need to recover from losses and prove yourself. Emotional surges often drive your decisions.",
        "core_traits": [
            "Loss-reactive",
            "Emotionally volatile",
            "Chase-prone",
            "Needs emotional reset",
        ],
        "decision_making_style": "You make impulsive decisions after setbacks, driven by the need to recover quickly and prove yourself.",
        "growth_edge": "Learning to pause and reset emotionally after losses will dramatically improve your outcomes.",
        "parameters": _params(0.8, 0.9, 0.3, 0.3, 0.9, 0.7, 0.4, 0.3),
    },
    "long_term_builder": {
        "display_name": "The Long-Term Builder",
        "description": "You think in years, not days. You build steadily, compound patiently, and trust the power of time.",
        "core_traits": [
            "Patient and disciplined",
            "Long-term focused",
            "Steady accumulator",
            "Emotionally stable",
        ],
        "decision_making_style": "You make decisions with a multi-year horizon, ignoring short-term noise in favor of sustainable growth.",
        "growth_edge": "Recognizing tactical opportunities within your long-term strategy will accelerate your compounding.",
        "parameters": _params(0.4, 0.2, 0.9, 0.7, 0.1, 0.6, 0.7, 0.7),
    },
    "fear_based_seller": {
        "display_name": "The Fear-Based Seller",
        "description": "You're highly sensitive to risk and volatility. Safety and emotional security drive your decisions.",
        "core_traits": [
            "Risk-averse",
            "Emotionally sensitive",
            "Safety-focused",
            "Panic-prone",
        ],
        "decision_making_style": "You make decisions to minimize risk and avoid loss, often exiting too early when volatility spikes.",
        "growth_edge": "Building emotional resilience to volatility will help you stay in winning positions longer.",
        "parameters": _params(0.2, 0.9, 0.5, 0.5, 0.7, 0.2, 0.6, 0.8),
    },
    "risk_addict": {
        "display_name": "The Risk Addict",
        "description": "You're drawn to volatility, high stakes, and intense swings. You thrive on adrenaline and bold moves.",
        "core_traits": [
            "Thrill-seeking",
            "Volatility-loving",
            "High-risk tolerance",
            "Impulsive",
        ],
        "decision_making_style": "You make bold, high-risk decisions quickly, drawn to opportunities with extreme upside and downside.",
        "growth_edge": "Adding structure and limits to your risk-taking will help you survive long enough to hit your big wins.",
        "parameters": _params(0.9, 0.7, 0.3, 0.4, 0.8, 0.9, 0.2, 0.1),
    },
}


# ══════════════════════════════════════════════════════════════════════════
# Legacy 16-question quiz: question -> option -> psyche types
# ══════════════════════════════════════════════════════════════════════════

QUESTION_MAPPINGS: Dict[int, Dict[str, List[str]]] = {
    1: {
        "A": ["quiet_strategist", "pattern_analyst", "long_term_builder"],
        "B": ["intuitive_empath", "escapist_romantic"],
        "C": ["momentum_chaser", "risk_addict"],
        "D": ["stabilizer", "long_term_builder"],
        "E": ["escapist_romantic", "emotional_fan"],
    },
    2: {
        "A": ["quiet_strategist", "long_term_builder"],
        "B": ["ambitious_builder", "risk_addict"],
        "C": ["intuitive_empath"],
        "D": ["emotional_fan", "fear_based_seller"],
        "E": ["stabilizer", "long_term_builder"],
    },
    3: {
        "A": ["revenge_bettor", "risk_addict"],
        "B": ["quiet_strategist", "pattern_analyst"],
        "C": ["intuitive_empath", "emotional_fan"],
        "D": ["fear_based_seller", "stabilizer"],
        "E": ["ambitious_builder"],
    },
    4: {
        "A": ["stabilizer", "long_term_builder"],
        "B": ["ambitious_builder", "risk_addict"],
        "C": ["momentum_chaser", "emotional_fan"],
        "D": ["intuitive_empath", "escapist_romantic"],
        "E": ["quiet_strategist", "pattern_analyst"],
    },
    5: {
        "A": ["pattern_analyst", "long_term_builder"],
        "B": ["momentum_chaser", "emotional_fan"],
        "C": ["ambitious_builder", "long_term_builder"],
        "D": ["escapist_romantic", "emotional_fan"],
        "E": ["fear_based_seller", "quiet_strategist"],
    },
    6: {
        "A": ["risk_addict", "momentum_chaser"],
        "B": ["ambitious_builder", "pattern_analyst"],
        "C": ["stabilizer", "long_term_builder"],
        "D": ["fear_based_seller", "emotional_fan"],
        "E": ["intuitive_empath", "escapist_romantic"],
    },
    7: {
        "A": ["quiet_strategist"],
        "B": ["escapist_romantic"],
        "C": ["stabilizer"],
        "D": ["intuitive_empath"],
        "E": ["emotional_fan"],
    },
    8: {
        "A": ["pattern_analyst", "long_term_builder"],
        "B": ["momentum_chaser", "risk_addict"],
        "C": ["intuitive_empath", "escapist_romantic"],
        "D": ["fear_based_seller", "stabilizer"],
        "E": ["ambitious_builder"],
    },
    9: {
        "A": ["ambitious_builder", "long_term_builder"],
        "B": ["fear_based_seller"],
        "C": ["quiet_strategist", "pattern_analyst"],
        "D": ["intuitive_empath", "escapist_romantic"],
        "E": ["risk_addict"],
    },
    10: {
        "A": ["revenge_bettor"],
        "B": ["quiet_strategist", "stabilizer"],
        "C": ["emotional_fan", "intuitive_empath"],
        "D": ["pattern_analyst"],
        "E": ["momentum_chaser", "risk_addict"],
    },
    11: {
        "A": ["ambitious_builder", "pattern_analyst"],
        "B": ["intuitive_empath", "escapist_romantic"],
        "C": ["quiet_strategist", "fear_based_seller"],
        "D": ["momentum_chaser", "risk_addict"],
        "E": ["stabilizer", "long_term_builder"],
    },
    12: {
        "A": ["ambitious_builder"],
        "B": ["stabilizer", "pattern_analyst"],
        "C": ["momentum_chaser", "risk_addict"],
        "D": ["fear_based_seller", "quiet_strategist"],
        "E": ["intuitive_empath"],
    },
    13: {
        "A": ["fear_based_seller"],
        "B": ["risk_addict", "ambitious_builder"],
        "C": ["pattern_analyst"],
        "D": ["intuitive_empath", "escapist_romantic"],
        "E": ["stabilizer", "long_term_builder"],
    },
    14: {
        "A": ["pattern_analyst", "quiet_strategist"],
        "B": ["intuitive_empath"],
        "C": ["fear_based_seller"],
        "D": ["ambitious_builder"],
        "E": ["stabilizer"],
    },
    15: {
        "A": ["risk_addict"],
        "B": ["intuitive_empath", "emotional_fan"],
        "C": ["quiet_strategist"],
        "D": ["momentum_chaser"],
        "E": ["stabilizer"],
    },
    16: {
        "A": ["quiet_strategist"],
        "B": ["ambitious_builder"],
        "C": ["intuitive_empath"],
        "D": ["stabilizer"],
        "E": ["risk_addict", "escapist_romantic"],
    },
}


# ══════════════════════════════════════════════════════════════════════════
# Display archetypes
# ══════════════════════════════════════════════════════════════════════════

DEFAULT_ARCHETYPE_DB_TYPE = "intuitive_empath"

ARCHETYPES: Dict[str, dict] = {
    "The Maverick": {
        "db_type": "risk_addict",
        "description": "Bold, passionate, and driven by instinct. You thrive on taking risks and making quick, decisive moves based on your gut feelings.",
        "traits": ["Risk-embracing", "Emotionally expressive", "Present-focused", "Intuitive"],
        "strengths": ["Quick decision-making", "High energy", "Adaptable to change", "Passionate commitment"],
        "challenges": ["May act impulsively", "Can struggle with patience", "Risk of burnout", "May overlook details"],
    },
    "The Strategist": {
        "db_type": "quiet_strategist",
        "description": "Methodical, patient, and data-driven. You excel at long-term planning and making calculated decisions based on thorough analysis.",
        "traits": ["Risk-averse", "Emotionally measured", "Future-oriented", "Analytical"],
        "strengths": ["Strategic thinking", "Consistent execution", "Risk management", "Long-term vision"],
        "challenges": ["May miss time-sensitive opportunities", "Can be overly cautious", "May struggle with uncertainty", "Risk of analysis paralysis"],
    },
    "The Visionary": {
        "db_type": "ambitious_builder",
        "description": "Bold yet calculated, you take big risks backed by solid research. You balance ambition with strategic thinking for long-term success.",
        "traits": ["Calculated risk-taker", "Emotionally controlled", "Future-oriented", "Strategic"],
        "strengths": ["Big-picture thinking", "Disciplined execution", "High ambition", "Data-driven risk-taking"],
        "challenges": ["May undervalue emotional factors", "Can be overly confident", "May struggle with flexibility", "Risk of overcommitment"],
    },
    "The Guardian": {
        "db_type": "stabilizer",
        "description": "Protective, emotionally attuned, and focused on long-term security. You prioritize stability and deep connections over quick wins.",
        "traits": ["Risk-cautious", "Emotionally aware", "Future-oriented", "Intuitive"],
        "strengths": ["Strong relationships", "Emotional intelligence", "Loyalty and commitment", "Protective instincts"],
        "challenges": ["May avoid necessary risks", "Can be overly protective", "May struggle with change", "Risk of missed opportunities"],
    },
    "The Pioneer": {
        "db_type": "long_term_builder",
        "description": "Passionate and ambitious with a long-term vision. You're willing to take bold risks to achieve your dreams and inspire others.",
        "traits": ["Risk-embracing", "Emotionally driven", "Future-oriented", "Visionary"],
        "strengths": ["Inspirational leadership", "High motivation", "Long-term commitment", "Bold innovation"],
        "challenges": ["May overextend resources", "Can be emotionally volatile", "May struggle with setbacks", "Risk of burnout"],
    },
    "The Pragmatist": {
        "db_type": "pattern_analyst",
        "description": "Practical, grounded, and focused on what works right now. You make steady, rational decisions based on current realities.",
        "traits": ["Risk-averse", "Emotionally neutral", "Present-focused", "Practical"],
        "strengths": ["Reliable execution", "Clear-headed decisions", "Adaptable to current needs", "Efficient problem-solving"],
        "challenges": ["May lack long-term vision", "Can be overly conservative", "May miss big opportunities", "Risk of stagnation"],
    },
    "The Catalyst": {
        "db_type": "momentum_chaser",
        "description": "Energetic, spontaneous, and emotionally expressive. You live in the moment and inspire action through your passion and enthusiasm.",
        "traits": ["Emotionally expressive", "Present-focused", "Intuitive", "Action-oriented"],
        "strengths": ["High energy", "Inspiring presence", "Quick to act", "Emotionally authentic"],
        "challenges": ["May lack long-term planning", "Can be impulsive", "May struggle with consistency", "Risk of emotional overwhelm"],
    },
    "The Adapter": {
        "db_type": "intuitive_empath",
        "description": "Flexible, balanced, and context-aware. You adjust your approach based on the situation, blending intuition with analysis and caution with boldness.",
        "traits": ["Balanced risk approach", "Emotionally flexible", "Adaptable time horizon", "Situational decision-making"],
        "strengths": ["Versatile approach", "Context-sensitive", "Balanced perspective", "Adaptive to change"],
        "challenges": ["May lack clear identity", "Can struggle with commitment", "May be indecisive at times", "Risk of spreading too thin"],
    },
}


# ══════════════════════════════════════════════════════════════════════════
# Archetype personas (admin impersonation / test users)
# ══════════════════════════════════════════════════════════════════════════

def _persona_params(risk, emotional, horizon, analytical, volatility, change) -> Dict[str, float]:
    return {
        "risk_appetite": risk,
        "emotional_reactivity": emotional,
        "time_horizon": horizon,
        "analytical_weight": analytical,
        "volatility_tolerance": volatility,
        "change_aversion": change,
    }


ARCHETYPE_PERSONAS: Dict[str, dict] = {
    "maverick": {
        "psyche_type": "risk_addict",
        "display_name": "The Maverick",
        "description": ARCHETYPES["The Maverick"]["description"],
        "core_traits": ARCHETYPES["The Maverick"]["traits"],
        "decision_making_style": "Quick decision-making with high energy and adaptability",
        "growth_edge": "May act impulsively and struggle with patience",
        "parameters": _persona_params(0.9, 0.9, 0.2, 0.2, 0.9, 0.1),
    },
    "strategist": {
        "psyche_type": "quiet_strategist",
        "display_name": "The Strategist",
        "description": ARCHETYPES["The Strategist"]["description"],
        "core_traits": ARCHETYPES["The Strategist"]["traits"],
        "decision_making_style": "Strategic thinking with consistent execution and risk management",
        "growth_edge": "May miss time-sensitive opportunities and struggle with uncertainty",
        "parameters": _persona_params(0.2, 0.2, 0.9, 0.9, 0.1, 0.8),
    },
    "visionary": {
        "psyche_type": "ambitious_builder",
        "display_name": "The Visionary",
        "description": ARCHETYPES["The Visionary"]["description"],
        "core_traits": ARCHETYPES["The Visionary"]["traits"],
        "decision_making_style": "Big-picture thinking with disciplined execution",
        "growth_edge": "May undervalue emotional factors and be overly confident",
        "parameters": _persona_params(0.8, 0.3, 0.8, 0.8, 0.7, 0.3),
    },
    "guardian": {
        "psyche_type": "stabilizer",
        "display_name": "The Guardian",
        "description": ARCHETYPES["The Guardian"]["description"],
        "core_traits": ARCHETYPES["The Guardian"]["traits"],
        "decision_making_style": "Emotionally intelligent with strong protective instincts",
        "growth_edge": "May avoid necessary risks and struggle with change",
        "parameters": _persona_params(0.2, 0.8, 0.8, 0.3, 0.2, 0.8),
    },
    "pioneer": {
        "psyche_type": "long_term_builder",
        "display_name": "The Pioneer",
        "description": "Passionate and ambitious with a long-term vision. You are willing to take bold risks to achieve your dreams and inspire others.",
        "core_traits": ARCHETYPES["The Pioneer"]["traits"],
        "decision_making_style": "Inspirational leadership with high motivation",
        "growth_edge": "May overextend resources and be emotionally volatile",
        "parameters": _persona_params(0.8, 0.8, 0.9, 0.4, 0.7, 0.2),
    },
    "pragmatist": {
        "psyche_type": "pattern_analyst",
        "display_name": "The Pragmatist",
        "description": ARCHETYPES["The Pragmatist"]["description"],
        "core_traits": ARCHETYPES["The Pragmatist"]["traits"],
        "decision_making_style": "Reliable execution with clear-headed decisions",
        "growth_edge": "May lack long-term vision and be overly conservative",
        "parameters": _persona_params(0.3, 0.3, 0.3, 0.8, 0.3, 0.6),
    },
    "catalyst": {
        "psyche_type": "momentum_chaser",
        "display_name": "The Catalyst",
        "description": ARCHETYPES["The Catalyst"]["description"],
        "core_traits": ARCHETYPES["The Catalyst"]["traits"],
        "decision_making_style": "High energy with inspiring presence",
        "growth_edge": "May lack long-term planning and be impulsive",
        "parameters": _persona_params(0.7, 0.8, 0.2, 0.3, 0.8, 0.2),
    },
    "adapter": {
        "psyche_type": "intuitive_empath",
        "display_name": "The Adapter",
        "description": ARCHETYPES["The Adapter"]["description"],
        "core_traits": ARCHETYPES["The Adapter"]["traits"],
        "decision_making_style": "Versatile and context-sensitive approach",
        "growth_edge": "May lack clear identity and struggle with commitment",
        "parameters": _persona_params(0.5, 0.5, 0.5, 0.5, 0.5, 0.5),
    },
}


# ══════════════════════════════════════════════════════════════════════════
# Per-category archetype insights
# ══════════════════════════════════════════════════════════════════════════

GENERIC_INSIGHTS: List[str] = [
    "Your unique approach brings valuable perspective to this area.",
    "Stay true to your natural tendencies while remaining open to growth.",
    "Balance your strengths with awareness of potential blind spots.",
]

CATEGORY_INSIGHTS: Dict[str, Dict[str, List[str]]] = {
    "career": {
        "The Maverick": [
            "You thrive in dynamic, fast-paced work environments where quick decisions are valued.",
            "Consider entrepreneurship or roles with high autonomy and impact.",
            "Your boldness can lead to breakthroughs, but balance it with strategic planning.",
        ],
        "The Strategist": [
            "You excel in roles requiring long-term planning and systematic execution.",
            "Consider positions in strategy, operations, or project management.",
            "Your patience is a strength—trust your process even when others rush.",
        ],
        "The Visionary": [
            "You're built for leadership roles that require both ambition and strategic thinking.",
            "Consider executive positions or founding your own venture.",
            "Your calculated risk-taking can drive major career breakthroughs.",
        ],
        "The Guardian": [
            "You thrive in roles where you can protect, nurture, and build long-term value.",
            "Consider positions in HR, education, healthcare, or team leadership.",
            "Your emotional intelligence is a superpower—use it to build strong teams.",
        ],
        "The Pioneer": [
            "You're driven to create lasting impact and inspire others with your vision.",
            "Consider roles in innovation, social impact, or transformational leadership.",
            "Your passion can move mountains, but pace yourself to avoid burnout.",
        ],
        "The Pragmatist": [
            "You excel in roles requiring practical problem-solving and reliable execution.",
            "Consider positions in operations, finance, or technical implementation.",
            "Your steady approach builds trust—don't undervalue your consistency.",
        ],
        "The Catalyst": [
            "You bring energy and momentum to any team or project you join.",
            "Consider roles in sales, marketing, creative fields, or change management.",
            "Your enthusiasm is contagious—channel it into sustainable action.",
        ],
        "The Adapter": [
            "Your versatility makes you valuable in diverse roles and industries.",
            "Consider positions that require cross-functional collaboration.",
            "Your flexibility is a strength—develop deeper expertise to complement it.",
        ],
    },
    "relationships": {
        "The Maverick": [
            "You bring passion and excitement to relationships, but may need to work on patience.",
            "Look for partners who appreciate spontaneity and can match your energy.",
            "Balance your boldness with vulnerability to deepen connections.",
        ],
        "The Strategist": [
            "You build relationships slowly but create deep, lasting bonds over time.",
            "Look for partners who value loyalty, consistency, and long-term commitment.",
            "Don't be afraid to take emotional risks—they're worth it.",
        ],
        "The Visionary": [
            "You seek partners who share your ambition and can support your big dreams.",
            "Look for relationships that challenge and inspire you intellectually.",
            "Remember to be present—your future focus can miss current connection.",
        ],
        "The Guardian": [
            "You're deeply loyal and protective in relationships, creating safe spaces for loved ones.",
            "Look for partners who appreciate your emotional depth and commitment.",
            "Balance protection with allowing others to take their own risks.",
        ],
        "The Pioneer": [
            "You seek relationships that fuel your passion and support your long-term vision.",
            "Look for partners who share your values and can handle your intensity.",
            "Make time for emotional connection amid your ambitious pursuits.",
        ],
        "The Pragmatist": [
            "You bring stability and reliability to relationships, building trust through actions.",
            "Look for partners who value consistency and practical partnership.",
            "Don't be afraid to express emotions—vulnerability strengthens bonds.",
        ],
        "The Catalyst": [
            "You bring joy, energy, and spontaneity to relationships.",
            "Look for partners who appreciate your enthusiasm and can ground you when needed.",
            "Balance excitement with deeper emotional intimacy over time.",
        ],
        "The Adapter": [
            "Your flexibility makes you a supportive, understanding partner.",
            "Look for relationships where you can be your authentic self, not just adaptive.",
            "Define your own needs clearly—don't lose yourself in accommodation.",
        ],
    },
    "money": {
        "The Maverick": [
            "You're comfortable with high-risk investments and may excel at active trading.",
            "Balance bold moves with a safety net—don't risk money you can't afford to lose.",
            "Your instincts can be profitable, but pair them with basic financial education.",
        ],
        "The Strategist": [
            "You excel at long-term wealth building through disciplined saving and investing.",
            "Consider index funds, real estate, or other steady wealth-building strategies.",
            "Your patience is your greatest asset—compound growth rewards time.",
        ],
        "The Visionary": [
            "You can build significant wealth through calculated, ambitious investments.",
            "Consider entrepreneurship, growth stocks, or strategic real estate.",
            "Your risk tolerance is high—ensure you have downside protection.",
        ],
        "The Guardian": [
            "You prioritize financial security and protecting what you've built.",
            "Consider conservative investments, emergency funds, and insurance.",
            "Your caution protects you—just ensure you're not missing growth opportunities.",
        ],
        "The Pioneer": [
            "You're willing to invest aggressively in pursuit of long-term financial freedom.",
            "Consider growth-oriented investments aligned with your values.",
            "Your ambition can build wealth—pace yourself to avoid overextension.",
        ],
        "The Pragmatist": [
            "You make practical financial decisions focused on current needs and stability.",
            "Consider balanced portfolios, budgeting tools, and automated savings.",
            "Your reliability builds wealth slowly—consider adding growth strategies.",
        ],
        "The Catalyst": [
            "You may make impulsive financial decisions based on excitement or emotion.",
            "Create systems to slow down major purchases and investment decisions.",
            "Your energy is an asset—channel it into learning financial strategies.",
        ],
        "The Adapter": [
            "Your flexible approach allows you to adjust strategies as circumstances change.",
            "Consider diversified portfolios that can adapt to different market conditions.",
            "Define clear financial goals to guide your adaptable approach.",
        ],
    },
    "health": {
        "The Maverick": [
            "You thrive on intense, varied workouts and may excel at competitive sports.",
            "Balance intensity with recovery—your body needs rest to sustain performance.",
            "Your boldness can push limits, but listen to your body to avoid injury.",
        ],
        "The Strategist": [
            "You excel with structured fitness plans and long-term health goals.",
            "Consider programs with clear progression and measurable outcomes.",
            "Your consistency is your superpower—trust the process even when progress is slow.",
        ],
        "The Visionary": [
            "You set ambitious health goals and are willing to make major lifestyle changes.",
            "Consider transformational programs or training for significant challenges.",
            "Your ambition drives results—ensure your goals are sustainable long-term.",
        ],
        "The Guardian": [
            "You prioritize health for longevity and to care for those you love.",
            "Consider holistic approaches that address physical and emotional wellness.",
            "Your protective instincts serve you—remember to care for yourself too.",
        ],
        "The Pioneer": [
            "You pursue health with passion and inspire others with your commitment.",
            "Consider challenging goals like marathons or transformational fitness journeys.",
            "Your intensity drives results—pace yourself to avoid burnout or injury.",
        ],
        "The Pragmatist": [
            "You focus on practical, sustainable health habits that fit your lifestyle.",
            "Consider simple routines like daily walks, meal prep, and consistent sleep.",
            "Your reliability builds health over time—don't undervalue small habits.",
        ],
        "The Catalyst": [
            "You bring energy and enthusiasm to fitness, but may struggle with consistency.",
            "Consider varied workouts that keep you engaged and excited.",
            "Your spontaneity is fun—pair it with a baseline routine for consistency.",
        ],
        "The Adapter": [
            "Your flexible approach allows you to adjust health habits as life changes.",
            "Consider versatile fitness options and intuitive eating approaches.",
            "Define core non-negotiables to maintain consistency amid flexibility.",
        ],
    },
    "sports": {
        "The Maverick": [
            "You thrive on the thrill of bold predictions and high-stakes outcomes.",
            "Balance aggressive plays with bankroll management to sustain long-term play.",
            "Your instincts can be sharp—track results to see when they're most accurate.",
        ],
        "The Strategist": [
            "You excel at analytical sports betting with long-term winning strategies.",
            "Consider systematic approaches like value betting or statistical modeling.",
            "Your patience and discipline are rare advantages in sports prediction.",
        ],
        "The Visionary": [
            "You can build sophisticated prediction systems and exploit market inefficiencies.",
            "Consider developing proprietary models or focusing on niche markets.",
            "Your ambition can lead to big wins—ensure you have risk controls in place.",
        ],
        "The Guardian": [
            "You approach sports predictions cautiously, prioritizing entertainment over profit.",
            "Set strict limits and stick to them—never risk more than you can afford.",
            "Your caution protects you—enjoy the game without chasing losses.",
        ],
        "The Pioneer": [
            "You're passionate about sports and willing to invest time in building expertise.",
            "Consider long-term strategies like season-long analysis or futures betting.",
            "Your commitment can build edge—stay disciplined to realize it.",
        ],
        "The Pragmatist": [
            "You make practical predictions based on current form and clear logic.",
            "Consider straightforward bets on favorites or simple prop bets.",
            "Your grounded approach avoids big losses—consider adding upside potential.",
        ],
        "The Catalyst": [
            "You love the excitement of live betting and spontaneous predictions.",
            "Set pre-game limits to avoid emotional, in-the-moment decisions.",
            "Your enthusiasm makes sports fun—protect it by betting responsibly.",
        ],
        "The Adapter": [
            "Your flexible approach allows you to adjust strategies across different sports.",
            "Consider diversifying across sports and bet types to match your versatility.",
            "Define a core strategy to guide your adaptable approach.",
        ],
    },
    "stocks": {
        "The Maverick": [
            "You're comfortable with volatile stocks and may excel at momentum trading.",
            "Balance aggressive trades with core holdings to manage risk.",
            "Your boldness can capture big moves—use stop losses to protect downside.",
        ],
        "The Strategist": [
            "You excel at buy-and-hold investing with quality companies.",
            "Consider value investing, dividend stocks, or index funds.",
            "Your patience allows compound growth—stay the course through volatility.",
        ],
        "The Visionary": [
            "You can identify transformational companies and invest for major returns.",
            "Consider growth stocks, emerging sectors, or thematic investing.",
            "Your conviction can drive wealth—diversify to manage concentration risk.",
        ],
        "The Guardian": [
            "You prioritize capital preservation and steady, reliable returns.",
            "Consider blue-chip stocks, bonds, or conservative balanced funds.",
            "Your caution protects capital—ensure you're not missing growth opportunities.",
        ],
        "The Pioneer": [
            "You're willing to invest aggressively in companies aligned with your vision.",
            "Consider growth stocks, IPOs, or sector-specific funds.",
            "Your passion drives commitment—ensure you're diversified beyond favorites.",
        ],
        "The Pragmatist": [
            "You focus on practical investments with clear fundamentals.",
            "Consider broad market ETFs, target-date funds, or robo-advisors.",
            "Your steady approach builds wealth—consider adding growth exposure.",
        ],
        "The Catalyst": [
            "You may trade frequently based on news, excitement, or market momentum.",
            "Create rules to slow down decisions and avoid emotional trading.",
            "Your energy can be channeled—focus it on learning rather than overtrading.",
        ],
        "The Adapter": [
            "Your flexible approach allows you to adjust strategies as markets change.",
            "Consider core-satellite portfolios with stable base and tactical positions.",
            "Define investment principles to guide your adaptable approach.",
        ],
    },
}


# ══════════════════════════════════════════════════════════════════════════
# Core onboarding questions
# ══════════════════════════════════════════════════════════════════════════

def _option(text: str, risk: int, emotional: int, time_horizon: int, decision_style: int) -> dict:
    return {
        "text": text,
        "scores": {
            "risk": risk,
            "emotional": emotional,
            "time_horizon": time_horizon,
            "decision_style": decision_style,
        },
    }


CORE_QUESTIONS: List[dict] = [
    {
        "id": "core_1_decision_style",
        "question": "When making an important decision, what's your typical approach?",
        "options": [
            _option("I analyze all available data and wait for clear patterns", 1, 1, 3, 1),
            _option("I trust my gut feeling and move quickly", 3, 3, 1, 3),
            _option("I seek advice from trusted people before deciding", 2, 2, 2, 2),
            _option("I make a plan but stay flexible as things unfold", 2, 2, 2, 2),
        ],
    },
    {
        "id": "core_2_opportunity_response",
        "question": "A rare opportunity appears, but it requires immediate action. What do you do?",
        "options": [
            _option("Jump on it immediately before it's gone", 3, 3, 1, 3),
            _option("Take a day to research and then decide", 2, 2, 2, 1),
            _option("Let it pass—if it's meant to be, it'll come back", 1, 1, 3, 1),
            _option("Quickly assess the basics and trust my instinct", 3, 2, 1, 2),
        ],
    },
    {
        "id": "core_3_setback_recovery",
        "question": "Something you invested time and energy into doesn't work out. How do you react?",
        "options": [
            _option("I feel it deeply but eventually move forward", 2, 3, 2, 2),
            _option("I analyze what went wrong to avoid repeating mistakes", 1, 1, 3, 1),
            _option("I bounce back quickly and try something new", 3, 1, 1, 3),
            _option("I take time to process before making my next move", 1, 2, 3, 1),
        ],
    },
    {
        "id": "core_4_risk_tolerance",
        "question": "How do you feel about taking risks in areas that matter to you?",
        "options": [
            _option("I embrace calculated risks when the potential payoff is high", 3, 2, 2, 1),
            _option("I prefer steady, predictable progress over big swings", 1, 1, 3, 1),
            _option("I take risks when my intuition says it's right", 3, 3, 1, 3),
            _option("I balance safety with occasional bold moves", 2, 2, 2, 2),
        ],
    },
    {
        "id": "core_5_relationship_approach",
        "question": "In your closest relationships, how do you typically show up?",
        "options": [
            _option("I'm deeply invested and wear my heart on my sleeve", 3, 3, 1, 3),
            _option("I'm loyal and steady, building trust over time", 1, 1, 3, 1),
            _option("I'm supportive but maintain my independence", 2, 2, 2, 2),
            _option("I adapt my approach based on the person and situation", 2, 2, 2, 2),
        ],
    },
    {
        "id": "core_6_timing_style",
        "question": "When do you prefer to act on your goals and plans?",
        "options": [
            _option("Right now—I don't like waiting", 3, 3, 1, 3),
            _option("When I've thoroughly prepared and the timing is right", 1, 1, 3, 1),
            _option("When I feel a strong pull or sense of readiness", 2, 3, 2, 3),
            _option("I set deadlines and stick to them", 2, 1, 2, 1),
        ],
    },
    {
        "id": "core_7_identity_source",
        "question": "What drives your sense of purpose and identity?",
        "options": [
            _option("Achieving goals and seeing measurable progress", 2, 1, 2, 1),
            _option("Deep connections and meaningful relationships", 2, 3, 2, 3),
            _option("Personal growth and self-understanding", 1, 2, 3, 1),
            _option("New experiences and exciting challenges", 3, 2, 1, 3),
        ],
    },
    {
        "id": "core_8_information_processing",
        "question": "When learning something new or solving a problem, you tend to:",
        "options": [
            _option("Dive deep into details and research thoroughly", 1, 1, 3, 1),
            _option("Get the big picture and figure out the rest as I go", 3, 2, 1, 3),
            _option("Learn by doing and adjusting based on results", 2, 2, 1, 2),
            _option("Seek patterns and connections to things I already know", 2, 1, 2, 1),
        ],
    },
]
