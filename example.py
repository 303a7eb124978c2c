"""
Пример использования сервиса проверки ценников
"""
import base64
import json
import sys
from pathlib import Path

import requests


def check_price_tag(image_path: str, api_url: str = "http://localhost:8000") -> dict:
    """
    Отправить фото ценника на проверку

    Args:
        image_path: Путь к изображению
        api_url: URL сервиса

    Returns:
        Результат проверки
    """
    image_file = Path(image_path)

    if not image_file.exists():
        raise FileNotFoundError(f"Image not found: {image_path}")

    print(f"📸 Reading image: {image_path}")
    image_bytes = image_file.read_bytes()
    image_base64 = base64.b64encode(image_bytes).decode("utf-8")

    print(f"📦 Image size: {len(image_bytes) / 1024:.2f} KB")
    print(f"🚀 Sending request to {api_url}/api/v1/scan")

    response = requests.post(
        f"{api_url}/api/v1/scan",
        json={"image": image_base64},
        timeout=60
    )

    if response.status_code != 200:
        print(f"❌ Error: {response.status_code}")
        print(response.json())
        return None

    result = response.json()
    scan = result["result"]

    print(f"\n📊 Confidence: {scan['confidence']:.0f}%")
    print(f"🔤 Recognized text:\n{scan['text']}")

    check = result.get("check")
    if check:
        verdict = "✅ Conversion is correct" if check["is_correct"] else "❌ Conversion is wrong"
        print(f"\n{verdict}")
        print(f"   Tag: {check['bgn_price']:.2f} лв / {check['eur_price']:.2f} €")
        print(f"   Expected: {check['expected_eur']:.2f} €")
    elif result.get("message"):
        print(f"\n⚠️  {result['message']}")

    return result


def main():
    """Точка входа"""
    if len(sys.argv) < 2:
        print("Usage: python example.py <path_to_price_tag_image> [api_url]")
        print("Example: python example.py tag.jpg")
        sys.exit(1)

    image_path = sys.argv[1]
    api_url = sys.argv[2] if len(sys.argv) > 2 else "http://localhost:8000"

    try:
        result = check_price_tag(image_path, api_url)

        if result:
            output_file = Path(image_path).stem + "_result.json"
            with open(output_file, "w", encoding="utf-8") as f:
                json.dump(result, f, indent=2, ensure_ascii=False)
            print(f"\n💾 Full result saved to: {output_file}")

    except FileNotFoundError as e:
        print(f"❌ Error: {e}")
        sys.exit(1)

    except requests.exceptions.ConnectionError:
        print(f"❌ Error: Cannot connect to service at {api_url}")
        print("Make sure the service is running: python run.py")
        sys.exit(1)


if __name__ == "__main__":
    main()
