"""Prompt template for the financial advice request."""

ADVICE_PROMPT = """Analyze these financial transactions and provide personalized advice:

Transaction History:
{transaction_history}

Key Statistics:
- Total Expenses: ${total_expenses:.2f}
- Total Savings: ${total_savings:.2f}

Please provide specific recommendations on:
1. How to better manage expenses based on spending patterns
2. Debt management strategies if applicable
3. How to optimize savings based on current habits
4. General financial health improvement tips
5. Any red flags in spending behavior

Make the advice practical and actionable. Don't mention that you're an AI - \
present it as financial insights."""
