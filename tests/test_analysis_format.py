from cognovain.utils.analysis_format import (
    extract_cognitive_biases,
    format_analysis_result,
    generate_shareable_summary,
)


class TestFormatAnalysisResult:
    def test_keeps_headings_and_existing_bullets(self):
        text = "Analysis:\n• 🧠 Already a bullet\n- dash bullet\n\nReframed Statement:"

        assert format_analysis_result(text) == text

    def test_adds_emoji_bullets_by_keyword(self):
        text = "\n".join([
            "This shows a cognitive distortion",
            "Instead, look at the evidence",
            "You feel overwhelmed",
            "Take a breath",
        ])

        assert format_analysis_result(text).split("\n") == [
            "• 🧠 This shows a cognitive distortion",
            "• ✅ Instead, look at the evidence",
            "• 😊 You feel overwhelmed",
            "• 💡 Take a breath",
        ]

    def test_trims_outer_whitespace(self):
        assert format_analysis_result("\n\n  Analysis:  \n") == "Analysis:"


class TestExtractCognitiveBiases:
    def test_finds_known_biases_once(self):
        text = "Catastrophizing and mind reading. More catastrophizing, plus Labeling."

        assert extract_cognitive_biases(text) == ["catastrophizing", "labeling", "mind reading"]

    def test_no_biases(self):
        assert extract_cognitive_biases("A perfectly balanced statement.") == []


class TestGenerateShareableSummary:
    def test_without_biases(self):
        assert generate_shareable_summary([]) == (
            "I used Cognovain to analyze my thinking patterns! Check it out at cognovain.vercel.app"
        )

    def test_single_bias(self):
        assert generate_shareable_summary(["catastrophizing"]) == (
            "I used Cognovain and identified the catastrophizing in my thinking! "
            "Improve your thinking at cognovain.vercel.app"
        )

    def test_mentions_at_most_two_biases(self):
        summary = generate_shareable_summary(["labeling", "mind reading", "filtering"])

        assert "labeling and mind reading" in summary
        assert "filtering" not in summary
