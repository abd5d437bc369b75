"""
Coaching text for EVOLVE Coach: welcome, GROW-phase replies and questions.
"""

from __future__ import annotations

WELCOME_MESSAGE = (
    "こんにちは！EVOLVEへようこそ。私はあなたの成長をサポートするAIコーチです。\n\n"
    "今日はどのようなことについてお話ししましょうか？あなたの目標や現在の状況、"
    "お悩みなど、何でもお聞かせください。\n\n"
    "一緒に、あなたらしい成長の道筋を見つけていきましょう。"
)

OPENING_QUESTIONS = [
    "今、一番実現したいことは何ですか？",
    "最近、気になっていることや変えたいことはありますか？",
    "理想の一日を思い浮かべると、どんな姿ですか？",
]

# =============================================================================
# STAGE-KEYED REPLIES: used when the conversation gives no context to reuse
# =============================================================================

STAGE_RESPONSES = {
    "Goal": {
        "precontemplation": "まずは、なぜその目標が大切なのか、一緒に考えてみませんか？",
        "contemplation": "素晴らしい目標ですね。その目標があなたにとってどんな意味を持つのか、もう少し詳しく聞かせてください。",
        "preparation": "その目標に向けて、具体的な計画を立てていきましょう。",
        "action": "目標に向けて行動されているのですね。現在の進捗はいかがですか？",
        "maintenance": "継続されているのは素晴らしいことです。さらに発展させる方法を考えてみましょう。",
    },
    "Reality": {
        "precontemplation": "現状について、客観的に見つめてみることから始めましょう。",
        "contemplation": "現在の状況を整理することで、次のステップが見えてくるかもしれません。",
        "preparation": "現状を踏まえて、実現可能な計画を立てていきましょう。",
        "action": "現在の取り組みの効果はいかがですか？",
        "maintenance": "継続できている要因は何だと思いますか？",
    },
    "Options": {
        "precontemplation": "様々な選択肢があることを知ることから始めてみませんか？",
        "contemplation": "いくつかの選択肢を比較検討してみましょう。",
        "preparation": "あなたに最も適した方法を選んでいきましょう。",
        "action": "現在の方法以外にも、試してみたい方法はありますか？",
        "maintenance": "新しいアプローチを取り入れることで、さらに効果を高められるかもしれません。",
    },
    "Will": {
        "precontemplation": "小さな一歩から始めてみることを考えてみませんか？",
        "contemplation": "実際に行動に移すために、何が必要だと思いますか？",
        "preparation": "素晴らしい決意ですね。具体的な行動計画を立てましょう。",
        "action": "その意欲、とても素晴らしいです。継続のコツを一緒に考えましょう。",
        "maintenance": "継続する意志の強さが感じられます。さらなる成長を目指しましょう。",
    },
}

# =============================================================================
# CONTEXT-AWARE REPLIES: {goal}, {challenge}, {topics} come from the history
# =============================================================================

GOAL_WITH_GOAL = (
    "「{goal}」という目標をお持ちなのですね。"
    "それが実現したとき、あなたの毎日はどのように変わっていそうですか？"
)
GOAL_WITH_TOPICS = (
    "{topics}について考えていらっしゃるのですね。"
    "その中で、特に実現したいことは何でしょうか？"
)

REALITY_WITH_CHALLENGE = (
    "「{challenge}」とお話しくださいましたね。"
    "その状況について、今どんなことが起きているのか一緒に整理してみましょう。"
)
REALITY_WITH_GOAL = (
    "「{goal}」に対して、今はどのあたりにいると感じていますか？"
    "できていることも、まだ難しいことも教えてください。"
)

OPTIONS_WITH_GOAL = (
    "「{goal}」に近づくための方法を、いくつか一緒に挙げてみましょう。"
    "どんな小さなアイデアでも構いません。"
)
OPTIONS_WITH_CHALLENGE = (
    "「{challenge}」という課題を乗り越える方法は、一つとは限りません。"
    "これまで試したことと、まだ試していないことを比べてみましょう。"
)

WILL_WITH_GOAL = (
    "「{goal}」に向けて、最初の一歩を決めましょう。"
    "今週、具体的に何をいつ実行しますか？"
)

# =============================================================================
# ADAPTIVE REPLIES: used when the phase is not recognized
# =============================================================================

ADAPTIVE_EMPATHETIC = (
    "お辛い気持ちを話してくださってありがとうございます。"
    "無理に前に進もうとしなくて大丈夫です。今感じていることを、もう少し聞かせてください。"
)
ADAPTIVE_ENCOURAGING = (
    "前向きな気持ちが伝わってきます！その勢いを大切にしながら、次の一歩を考えていきましょう。"
)
ADAPTIVE_BY_FLOW = {
    "initial": "お話を聞かせていただきありがとうございます。まずは、今の気持ちや考えを自由にお聞かせください。",
    "exploration": "少しずつ見えてきましたね。あなたにとって大切なことを、もう少し深めてみましょう。",
    "deepening": "ここまでのお話から、あなたの想いがよく伝わってきます。核心に近づいている気がします。",
    "action_planning": "たくさんお話ししてきましたね。そろそろ、具体的な行動に落とし込んでいきましょう。",
}

# =============================================================================
# FOLLOW-UP QUESTIONS
# =============================================================================

GENERIC_QUESTIONS = {
    "Goal": [
        "あなたが本当に達成したいことは何ですか？",
        "その目標が実現したとき、どんな気持ちになりますか？",
        "具体的にはどのような状態を目指していますか？",
    ],
    "Reality": [
        "現在の状況を詳しく教えてください",
        "これまでにどんな取り組みをされましたか？",
        "今、一番の課題は何だと感じていますか？",
    ],
    "Options": [
        "どのような方法が考えられますか？",
        "過去に成功した経験から学べることはありますか？",
        "他にどんな選択肢がありそうですか？",
    ],
    "Will": [
        "具体的に何から始めますか？",
        "いつまでに実行しますか？",
        "どうやって進捗を確認しますか？",
    ],
}

GOAL_QUESTIONS = {
    "Goal": [
        "「{goal}」が実現したとき、どんな気持ちになりますか？",
        "「{goal}」を達成できたと判断する基準は何ですか？",
        "その目標は、あなたにとってなぜ大切なのでしょうか？",
    ],
    "Reality": [
        "「{goal}」について、今どこまで進んでいますか？",
        "「{goal}」に向けて、これまでにどんな取り組みをされましたか？",
        "今、一番の障害になっていることは何ですか？",
    ],
    "Options": [
        "「{goal}」に近づくために、どんな方法が考えられますか？",
        "同じような目標を達成した人は、どんなやり方をしていましたか？",
        "制約がなかったとしたら、何を試してみたいですか？",
    ],
    "Will": [
        "「{goal}」のために、明日から何を始めますか？",
        "その行動は、いつ・どこで実行しますか？",
        "続けられたかどうかを、どうやって確認しますか？",
    ],
}
