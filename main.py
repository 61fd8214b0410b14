# main.py
import sys

from poe_puppet import PoePuppet, PuppetConfig, PuppetError, configure_logging


if __name__ == "__main__":
    # 👇 Pass a message on the command line, or edit the default
    message = " ".join(sys.argv[1:]) or "Hello"

    config = PuppetConfig.from_env()
    configure_logging(config.log_level, config.log_file)

    print(f"\n🔐 Opening {config.base_url} with profile '{config.user_data_dir}' ...\n")
    try:
        with PoePuppet(config) as puppet:
            print(f"🤖 Chatbots on the page: {[agent.name for agent in puppet.agents]}")
            print(f"🎯 Active chatbot: {puppet.active_agent}\n")

            print(f"💬 You: {message}")
            reply = puppet.send(message)
            print(f"🤖 {puppet.active_agent}: {reply}")
    except PuppetError as exc:
        print(f"❌ {exc}")
        sys.exit(1)

    print("\n✅ Session closed.\n")
